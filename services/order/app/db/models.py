
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, DateTime, ForeignKey, Float, Enum as SAEnum
from datetime import datetime
from enum import Enum
from typing import Optional
from app.db.session import Base

class OrderStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    PENDING_DELIVERY = "PENDING_DELIVERY"
    DELIVERY_ASSIGNMENT_FAILED = "DELIVERY_ASSIGNMENT_FAILED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

class PortionSize(str, Enum):
    # declaration order is smallest first
    Small = "Small"
    Medium = "Medium"
    Large = "Large"

class Order(Base):
    __tablename__ = "orders"
    order_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    customer_id: Mapped[str] = mapped_column(String(64), index=True)
    restaurant_id: Mapped[str] = mapped_column(String(64), index=True)

    customer_name: Mapped[str] = mapped_column(String(255))
    customer_contact: Mapped[str] = mapped_column(String(64))
    longitude: Mapped[float] = mapped_column(Float)
    latitude: Mapped[float] = mapped_column(Float)

    order_total: Mapped[float] = mapped_column(Float)
    delivery_fee: Mapped[float] = mapped_column(Float)
    total_amount: Mapped[float] = mapped_column(Float)
    payment_type: Mapped[str] = mapped_column(String(32))
    status: Mapped[OrderStatus] = mapped_column(SAEnum(OrderStatus, native_enum=False, length=32), default=OrderStatus.PENDING)

    driver_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    driver_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    vehicle_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def has_driver(self) -> bool:
        return self.driver_id is not None

class OrderItem(Base):
    __tablename__ = "order_items"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.order_id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    item_id: Mapped[str] = mapped_column(String(64))
    item_name: Mapped[str] = mapped_column(String(255))
    quantity: Mapped[int] = mapped_column(Integer)
    portion_size: Mapped[PortionSize] = mapped_column(SAEnum(PortionSize, native_enum=False, length=16), default=PortionSize.Small)
    price: Mapped[float] = mapped_column(Float)
    total_price: Mapped[float] = mapped_column(Float)
    image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    order = relationship("Order", back_populates="items")
