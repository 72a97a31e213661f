import os
import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before the app modules read their settings
os.environ.setdefault("POSTGRES_DSN", "sqlite://")
os.environ.setdefault("EVENTS_ENABLED", "false")

from fastapi.testclient import TestClient  # noqa: E402

from app.api.deps import get_cart_client, get_db, get_delivery_notifier  # noqa: E402
from app.clients.cart import CartClient  # noqa: E402
from app.clients.delivery import DeliveryNotifier  # noqa: E402
from app.db.repository import OrderRepository  # noqa: E402
from app.db.session import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.services.orders import OrderService  # noqa: E402

from factories import CART_BASE, DELIVERY_BASE, FakeUpstreams  # noqa: E402


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upstreams():
    return FakeUpstreams()


@pytest.fixture
def http_client(upstreams):
    with httpx.Client(transport=httpx.MockTransport(upstreams.handler)) as client:
        yield client


@pytest.fixture
def cart_client(http_client):
    return CartClient(http_client, CART_BASE)


@pytest.fixture
def notifier(http_client, session_factory):
    return DeliveryNotifier(http_client, DELIVERY_BASE, session_factory)


@pytest.fixture
def dispatched():
    return []


@pytest.fixture
def service(db, cart_client, dispatched):
    return OrderService(OrderRepository(db), cart_client, schedule_dispatch=dispatched.append)


@pytest.fixture
def client(session_factory, cart_client, notifier):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_cart_client] = lambda: cart_client
    app.dependency_overrides[get_delivery_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
