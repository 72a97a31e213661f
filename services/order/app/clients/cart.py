import logging
import httpx
from pydantic import ValidationError

from app.core.errors import EmptyCart, UpstreamUnavailable
from app.schemas import CartSnapshot

logger = logging.getLogger(__name__)


class CartClient:
    """Reads a customer's cart for one restaurant from the cart service.

    The returned snapshot is copied into the order at creation time and never
    consulted again.
    """

    def __init__(self, client: httpx.Client, base_url: str):
        self.client = client
        self.base_url = base_url.rstrip("/")

    def fetch_cart(self, customer_id: str, restaurant_id: str) -> CartSnapshot:
        url = f"{self.base_url}/{customer_id}/{restaurant_id}"
        logger.info(f"Fetching cart from {url}")
        try:
            resp = self.client.get(url)
        except httpx.RequestError as e:
            logger.error(f"Cart service unreachable: {e}")
            raise UpstreamUnavailable("Cart service unavailable")
        if not resp.is_success:
            logger.error(f"Cart service returned {resp.status_code}: {resp.text}")
            raise UpstreamUnavailable(f"Cart service error ({resp.status_code})")

        try:
            body = resp.json()
        except ValueError:
            raise UpstreamUnavailable("Cart service returned an invalid body")
        if body is None:
            raise EmptyCart("Cart is empty or not found")
        try:
            cart = CartSnapshot.model_validate(body)
        except ValidationError as e:
            logger.error(f"Unreadable cart payload: {e}")
            raise UpstreamUnavailable("Cart service returned an invalid cart")
        if not cart.items:
            raise EmptyCart("Cart is empty")
        return cart
