"""Domain errors raised by the order service.

Each error carries the HTTP status the API layer answers with; the handler
registered in ``app.main`` renders them as ``{"detail": message}``.
"""


class OrderServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamUnavailable(OrderServiceError):
    """A collaborator service could not be reached or answered with an error."""
    status_code = 503


class EmptyCart(OrderServiceError):
    status_code = 400


class NotFound(OrderServiceError):
    status_code = 404


class InvalidStatus(OrderServiceError):
    status_code = 400


class InvalidTransition(OrderServiceError):
    status_code = 409


class ConcurrentModification(OrderServiceError):
    """The order changed between read and write; the caller should retry."""
    status_code = 409
