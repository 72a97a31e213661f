from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConcurrentModification, NotFound
from app.db.models import Order


class OrderRepository:
    """Whole-aggregate persistence for orders.

    Callers load an order, mutate it and hand it back to ``save``; there are
    no partial-field updates at this layer.
    """

    def __init__(self, db: Session):
        self.db = db

    def save(self, order: Order) -> Order:
        self.db.add(order)
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            raise ConcurrentModification(f"Order {order.order_id} was modified concurrently")
        self.db.refresh(order)
        return order

    def find_by_id(self, order_id: str) -> Optional[Order]:
        return self.db.get(Order, order_id)

    def get(self, order_id: str) -> Order:
        order = self.find_by_id(order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    def find_by_customer_id(self, customer_id: str) -> List[Order]:
        stmt = select(Order).where(Order.customer_id == customer_id).order_by(Order.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def find_all(self) -> List[Order]:
        stmt = select(Order).order_by(Order.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def delete(self, order: Order):
        self.db.delete(order)
        self.db.commit()
