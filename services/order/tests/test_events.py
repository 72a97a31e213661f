import time

import pytest
from kafka.errors import KafkaTimeoutError, NoBrokersAvailable

from app.core.config import settings
from app.kafka import producer

ORDER_BODY = {
    "customerId": "cust-1",
    "restaurantId": "rest-1",
    "customerName": "Nimal Perera",
    "customerContact": "+94771234567",
    "longitude": 79.8612,
    "latitude": 6.9271,
    "paymentType": "CARD",
}


class FakeProducer:
    instances = []
    fail_with = None

    def __init__(self, **kwargs):
        if FakeProducer.fail_with is not None:
            raise FakeProducer.fail_with
        self.kwargs = kwargs
        self.sent = []
        self.flushes = []
        FakeProducer.instances.append(self)

    def send(self, topic, key=None, value=None):
        self.sent.append((topic, key, value))

    def flush(self, timeout=None):
        self.flushes.append(timeout)

    def close(self, timeout=None):
        pass


@pytest.fixture
def events_enabled(monkeypatch):
    monkeypatch.setattr(settings, "EVENTS_ENABLED", True)
    producer.close()
    yield
    producer.close()


@pytest.fixture
def fake_kafka(events_enabled, monkeypatch):
    FakeProducer.instances = []
    FakeProducer.fail_with = None
    monkeypatch.setattr(producer, "KafkaProducer", FakeProducer)
    return FakeProducer


def test_event_is_sent_and_flushed(fake_kafka):
    producer.send("order-1", {"type": "order.created"})

    (p,) = fake_kafka.instances
    assert p.sent == [("order.events", "order-1", {"type": "order.created"})]
    assert p.flushes == [settings.KAFKA_TIMEOUT_MS / 1000]


def test_producer_waits_are_bounded(fake_kafka):
    producer.send("order-1", {"type": "order.created"})

    kwargs = fake_kafka.instances[0].kwargs
    for key in ("max_block_ms", "request_timeout_ms", "api_version_auto_timeout_ms"):
        assert kwargs[key] == settings.KAFKA_TIMEOUT_MS
        assert kwargs[key] <= 5000


def test_unreachable_broker_is_not_retried_during_backoff(fake_kafka, monkeypatch):
    attempts = []

    class Unreachable(FakeProducer):
        def __init__(self, **kwargs):
            attempts.append(kwargs)
            raise NoBrokersAvailable()

    monkeypatch.setattr(producer, "KafkaProducer", Unreachable)

    producer.send("order-1", {"type": "order.created"})
    producer.send("order-2", {"type": "order.created"})
    producer.send("order-1", {"type": "order.status_changed"})

    assert len(attempts) == 1


def test_broker_is_retried_after_backoff(fake_kafka):
    fake_kafka.fail_with = NoBrokersAvailable()
    producer.send("order-1", {"type": "order.created"})
    assert fake_kafka.instances == []

    fake_kafka.fail_with = None
    producer._retry_after = time.monotonic() - 1
    producer.send("order-2", {"type": "order.created"})

    (p,) = fake_kafka.instances
    assert [key for _, key, _ in p.sent] == ["order-2"]


def test_flush_timeout_starts_backoff(fake_kafka, monkeypatch):
    def slow_flush(self, timeout=None):
        raise KafkaTimeoutError("flush timed out")

    monkeypatch.setattr(FakeProducer, "flush", slow_flush)

    producer.send("order-1", {"type": "order.created"})
    producer.send("order-2", {"type": "order.created"})

    (p,) = fake_kafka.instances
    assert [key for _, key, _ in p.sent] == ["order-1"]


def test_orders_are_written_promptly_when_broker_is_down(client, events_enabled, monkeypatch):
    monkeypatch.setattr(settings, "KAFKA_BOOTSTRAP", "127.0.0.1:1")
    monkeypatch.setattr(settings, "KAFKA_TIMEOUT_MS", 500)

    started = time.monotonic()
    first = client.post("/api/order/create", json=ORDER_BODY)
    second = client.post("/api/order/create", json=ORDER_BODY)
    elapsed = time.monotonic() - started

    assert (first.status_code, second.status_code) == (200, 200)
    assert len(client.get("/api/order/getAll").json()) == 2
    assert elapsed < 10
