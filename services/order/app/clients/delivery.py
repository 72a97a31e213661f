import logging
from typing import Callable
import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import OrderServiceError
from app.db.models import OrderStatus
from app.db.repository import OrderRepository
from app.services.orders import OrderService

logger = logging.getLogger(__name__)


class DeliveryNotifier:
    """Announces new orders to the delivery service.

    ``notify`` is meant to run after the create-order response has been sent.
    Its outcome is recorded on the order as ``PENDING_DELIVERY`` or
    ``DELIVERY_ASSIGNMENT_FAILED`` and is never raised to anyone.
    """

    def __init__(self, client: httpx.Client, base_url: str, session_factory: Callable[[], Session]):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.session_factory = session_factory

    def request_delivery(self, order_id: str) -> bool:
        try:
            resp = self.client.post(f"{self.base_url}/api/deliveries", json={"orderId": order_id})
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to create delivery for order {order_id}: {e}")
            return False
        logger.info(f"Delivery created for order {order_id}")
        return True

    def notify(self, order_id: str):
        if self.request_delivery(order_id):
            status = OrderStatus.PENDING_DELIVERY
        else:
            status = OrderStatus.DELIVERY_ASSIGNMENT_FAILED

        db = None
        try:
            db = self.session_factory()
            OrderService(OrderRepository(db)).update_status(order_id, status.value)
        except OrderServiceError as e:
            logger.error(f"Could not record delivery outcome {status.value} for order {order_id}: {e.message}")
        except SQLAlchemyError as e:
            logger.error(f"Database error recording delivery outcome {status.value} for order {order_id}: {e}")
        finally:
            if db is not None:
                db.close()
