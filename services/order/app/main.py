import logging
import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.version import VERSION
from app.api import routes
from app.clients.cart import CartClient
from app.clients.delivery import DeliveryNotifier
from app.core.config import settings
from app.core.errors import OrderServiceError
from app.core.logging import configure_logging
from app.db.session import SessionLocal
from app.kafka import producer as order_events
from prometheus_fastapi_instrumentator import Instrumentator

configure_logging()
logger = logging.getLogger(__name__)

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title="Order Service", version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/order/metrics",
    should_gzip=True,
)

@app.exception_handler(OrderServiceError)
async def order_service_error_handler(request: Request, exc: OrderServiceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

# Health endpoints
@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/order/health")
def order_health():
    return {"status": "ok"}

@app.get("/v1/_info")
def info():
    return {"service": "order", "version": VERSION}

@app.on_event("startup")
async def startup_event():
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            logger.debug(f"{route.methods} {route.path}")

    # Outbound clients are built once and shared by every request.
    timeout = httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS)
    app.state.cart_http = httpx.Client(timeout=timeout)
    app.state.delivery_http = httpx.Client(timeout=timeout)
    app.state.cart_client = CartClient(app.state.cart_http, settings.CART_BASE)
    app.state.delivery_notifier = DeliveryNotifier(app.state.delivery_http, settings.DELIVERY_BASE, SessionLocal)

@app.on_event("shutdown")
async def shutdown_event():
    app.state.cart_http.close()
    app.state.delivery_http.close()
    order_events.close()

app.include_router(routes.router, prefix="/api/order", tags=["orders"])
