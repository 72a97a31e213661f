from fastapi import APIRouter, Depends, Response
from typing import List

from app.api.deps import get_order_service
from app.schemas import (
    ApplyDiscountRequest,
    AssignDriverRequest,
    CreateOrderRequest,
    OrderActionResponse,
    OrderRead,
)
from app.services.orders import OrderService

router = APIRouter()

@router.post("/create", response_model=OrderRead)
def create_order(payload: CreateOrderRequest, svc: OrderService = Depends(get_order_service)):
    return OrderRead.from_order(svc.create_order(payload))

@router.get("/getAll", response_model=List[OrderRead])
def get_all_orders(svc: OrderService = Depends(get_order_service)):
    return [OrderRead.from_order(o) for o in svc.list_orders()]

@router.get("/customer/{customer_id}", response_model=List[OrderRead])
def get_orders_by_customer(customer_id: str, svc: OrderService = Depends(get_order_service)):
    return [OrderRead.from_order(o) for o in svc.list_customer_orders(customer_id)]

@router.get("/{order_id}", response_model=OrderRead)
def get_order(order_id: str, svc: OrderService = Depends(get_order_service)):
    return OrderRead.from_order(svc.get_order(order_id))

@router.put("/update-status/{order_id}", response_model=OrderActionResponse)
def update_order_status(order_id: str, status: str, svc: OrderService = Depends(get_order_service)):
    order = svc.update_status(order_id, status)
    return OrderActionResponse(message="Order status has been successfully updated", order=OrderRead.from_order(order))

@router.put("/cancel/{order_id}", response_model=OrderActionResponse)
def cancel_order(order_id: str, svc: OrderService = Depends(get_order_service)):
    order = svc.cancel_order(order_id)
    return OrderActionResponse(message="Order has been successfully canceled", order=OrderRead.from_order(order))

@router.put("/assign-driver/{order_id}", response_model=OrderActionResponse)
def assign_driver(order_id: str, payload: AssignDriverRequest, svc: OrderService = Depends(get_order_service)):
    order = svc.assign_driver(order_id, payload)
    return OrderActionResponse(message="Driver has been successfully assigned to the order", order=OrderRead.from_order(order))

@router.put("/apply-discount/{order_id}", response_model=OrderActionResponse)
def apply_discount(order_id: str, payload: ApplyDiscountRequest, svc: OrderService = Depends(get_order_service)):
    order = svc.apply_discount(order_id, payload.discount_amount)
    return OrderActionResponse(message="Discount has been successfully applied to the order", order=OrderRead.from_order(order))

@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, svc: OrderService = Depends(get_order_service)):
    svc.delete_order(order_id)
    return Response(status_code=204)
