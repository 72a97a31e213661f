from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.db.repository import OrderRepository
from app.clients.cart import CartClient
from app.clients.delivery import DeliveryNotifier
from app.services.orders import OrderService

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_cart_client(request: Request) -> CartClient:
    return request.app.state.cart_client

def get_delivery_notifier(request: Request) -> DeliveryNotifier:
    return request.app.state.delivery_notifier

def get_order_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    cart_client: CartClient = Depends(get_cart_client),
    notifier: DeliveryNotifier = Depends(get_delivery_notifier),
) -> OrderService:
    # Delivery dispatch runs after the response has been sent.
    def schedule_dispatch(order_id: str):
        background_tasks.add_task(notifier.notify, order_id)
    return OrderService(OrderRepository(db), cart_client, schedule_dispatch=schedule_dispatch)
