import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from app.core.config import settings
from app.core.errors import InvalidStatus, InvalidTransition
from app.db.models import Order, OrderItem, OrderStatus
from app.db.repository import OrderRepository
from app.kafka.producer import send
from app.schemas import AssignDriverRequest, CreateOrderRequest

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.utcnow()


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value.strip().upper())
    except (ValueError, AttributeError):
        raise InvalidStatus(f"Invalid order status: {value}")


class OrderService:
    """Order creation and the status transitions applied to existing orders.

    ``cart_client`` is only needed for ``create_order``. ``schedule_dispatch``
    receives the id of every newly persisted order and is expected to run the
    delivery notifier without blocking the caller.
    """

    def __init__(
        self,
        repo: OrderRepository,
        cart_client=None,
        schedule_dispatch: Optional[Callable[[str], None]] = None,
    ):
        self.repo = repo
        self.cart_client = cart_client
        self.schedule_dispatch = schedule_dispatch

    # --- creation ---

    def create_order(self, payload: CreateOrderRequest) -> Order:
        cart = self.cart_client.fetch_cart(payload.customer_id, payload.restaurant_id)

        order_total = sum(it.total_price for it in cart.items)
        delivery_fee = settings.DELIVERY_FEE
        now = utcnow()

        order = Order(
            order_id=str(uuid.uuid4()),
            customer_id=payload.customer_id,
            restaurant_id=payload.restaurant_id,
            customer_name=payload.customer_name,
            customer_contact=payload.customer_contact,
            longitude=payload.longitude,
            latitude=payload.latitude,
            order_total=order_total,
            delivery_fee=delivery_fee,
            total_amount=order_total + delivery_fee,
            payment_type=payload.payment_type,
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        order.items = [
            OrderItem(
                position=pos,
                item_id=it.item_id,
                item_name=it.item_name,
                quantity=it.quantity,
                portion_size=it.portion_size,
                price=it.price,
                total_price=it.total_price,
                image=it.image,
            )
            for pos, it in enumerate(cart.items)
        ]
        self.repo.save(order)
        logger.info(f"Order {order.order_id} created for customer {order.customer_id} (total {order.total_amount})")

        send(key=order.order_id, value={
            "type": "order.created",
            "order_id": order.order_id,
            "customer_id": order.customer_id,
            "restaurant_id": order.restaurant_id,
            "total_amount": order.total_amount,
            "items": [{"item_id": it.item_id, "quantity": it.quantity} for it in order.items],
        })

        if self.schedule_dispatch:
            self.schedule_dispatch(order.order_id)
        return order

    # --- reads ---

    def get_order(self, order_id: str) -> Order:
        return self.repo.get(order_id)

    def list_orders(self) -> List[Order]:
        return self.repo.find_all()

    def list_customer_orders(self, customer_id: str) -> List[Order]:
        return self.repo.find_by_customer_id(customer_id)

    def delete_order(self, order_id: str):
        order = self.repo.get(order_id)
        self.repo.delete(order)
        logger.info(f"Order {order_id} deleted")

    # --- transitions ---

    def _save_transition(self, order: Order, previous: OrderStatus) -> Order:
        order.updated_at = utcnow()
        self.repo.save(order)
        if order.status != previous:
            logger.info(f"Order {order.order_id} status {previous.value} -> {order.status.value}")
            send(key=order.order_id, value={
                "type": "order.status_changed",
                "order_id": order.order_id,
                "customer_id": order.customer_id,
                "previous_status": previous.value,
                "status": order.status.value,
            })
        return order

    def update_status(self, order_id: str, status: str) -> Order:
        # Any member of OrderStatus is accepted regardless of the current one;
        # only cancel_order enforces a precondition.
        order = self.repo.get(order_id)
        new_status = parse_status(status)
        previous = order.status
        order.status = new_status
        return self._save_transition(order, previous)

    def cancel_order(self, order_id: str) -> Order:
        order = self.repo.get(order_id)
        if order.status != OrderStatus.PENDING:
            raise InvalidTransition(f"Cannot cancel an order that is not PENDING (status={order.status.value})")
        order.status = OrderStatus.CANCELLED
        return self._save_transition(order, OrderStatus.PENDING)

    def assign_driver(self, order_id: str, payload: AssignDriverRequest) -> Order:
        order = self.repo.get(order_id)
        previous = order.status
        order.driver_id = payload.driver_id
        order.driver_name = payload.driver_name
        order.vehicle_number = payload.vehicle_number
        order.status = OrderStatus.OUT_FOR_DELIVERY
        return self._save_transition(order, previous)

    def apply_discount(self, order_id: str, amount: float) -> Order:
        order = self.repo.get(order_id)
        order.total_amount = max(0.0, order.total_amount - amount)
        return self._save_transition(order, order.status)
