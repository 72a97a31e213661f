import logging
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List

from app.db.models import Order, OrderStatus, PortionSize

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


# --- Cart service payloads ---

class CartItemSnapshot(CamelModel):
    item_id: str = Field(max_length=64)
    item_name: str = Field(default="", max_length=255)
    quantity: int = 1
    portion_size: PortionSize = Field(
        default=PortionSize.Small,
        validation_alias=AliasChoices("potionSize", "portionSize", "portion_size"),
    )
    price: float = 0.0
    total_price: float = 0.0
    image: Optional[str] = Field(default=None, max_length=1024)

    @field_validator("portion_size", mode="before")
    @classmethod
    def default_portion_size(cls, v):
        # Unset or unrecognised sizes fall back to the smallest portion.
        if v is None:
            return PortionSize.Small
        try:
            return PortionSize(v)
        except ValueError:
            logger.warning(f"Unknown portion size {v!r}, defaulting to {PortionSize.Small.value}")
            return PortionSize.Small


class CartSnapshot(CamelModel):
    id: Optional[str] = None
    customer_id: Optional[str] = None
    restaurant_id: Optional[str] = None
    items: List[CartItemSnapshot] = []
    total_price: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("items", mode="before")
    @classmethod
    def null_items(cls, v):
        return v or []


# --- Requests ---

class CreateOrderRequest(CamelModel):
    customer_id: str = Field(min_length=1, max_length=64)
    restaurant_id: str = Field(min_length=1, max_length=64)
    customer_name: str = Field(min_length=1, max_length=255)
    customer_contact: str = Field(min_length=1, max_length=64)
    longitude: float = Field(ge=-180, le=180)
    latitude: float = Field(ge=-90, le=90)
    payment_type: str = Field(min_length=1, max_length=32)


class AssignDriverRequest(CamelModel):
    driver_id: str = Field(min_length=1, max_length=64)
    driver_name: str = Field(min_length=1, max_length=255)
    vehicle_number: str = Field(min_length=1, max_length=32)


class ApplyDiscountRequest(CamelModel):
    discount_amount: float


# --- Responses ---

class CustomerDetailsRead(CamelModel):
    name: str
    contact: str
    longitude: float
    latitude: float


class CartItemRead(CamelModel):
    item_id: str
    item_name: str
    quantity: int
    portion_size: PortionSize
    price: float
    total_price: float
    image: Optional[str] = None


class DriverDetailsRead(CamelModel):
    driver_id: str
    driver_name: str
    vehicle_number: str


class OrderRead(CamelModel):
    order_id: str
    customer_id: str
    restaurant_id: str
    customer_details: CustomerDetailsRead
    cart_items: List[CartItemRead]
    order_total: float
    delivery_fee: float
    total_amount: float
    payment_type: str
    status: OrderStatus
    driver_details: Optional[DriverDetailsRead] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderRead":
        driver = None
        if order.has_driver:
            driver = DriverDetailsRead(
                driver_id=order.driver_id,
                driver_name=order.driver_name or "",
                vehicle_number=order.vehicle_number or "",
            )
        return cls(
            order_id=order.order_id,
            customer_id=order.customer_id,
            restaurant_id=order.restaurant_id,
            customer_details=CustomerDetailsRead(
                name=order.customer_name,
                contact=order.customer_contact,
                longitude=order.longitude,
                latitude=order.latitude,
            ),
            cart_items=[
                CartItemRead(
                    item_id=it.item_id,
                    item_name=it.item_name,
                    quantity=it.quantity,
                    portion_size=it.portion_size,
                    price=it.price,
                    total_price=it.total_price,
                    image=it.image,
                )
                for it in order.items
            ],
            order_total=order.order_total,
            delivery_fee=order.delivery_fee,
            total_amount=order.total_amount,
            payment_type=order.payment_type,
            status=order.status,
            driver_details=driver,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderActionResponse(BaseModel):
    message: str
    order: OrderRead
