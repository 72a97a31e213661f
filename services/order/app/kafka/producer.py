
import json, logging, time
from kafka import KafkaProducer
from kafka.errors import KafkaError
from app.core.config import settings

logger = logging.getLogger(__name__)

_producer = None
# monotonic time before which no new broker connection is attempted
_retry_after = 0.0

def get_producer() -> KafkaProducer:
    global _producer
    if _producer is None:
        timeout_ms = settings.KAFKA_TIMEOUT_MS
        _producer = KafkaProducer(
            bootstrap_servers=[settings.KAFKA_BOOTSTRAP],
            value_serializer=lambda v: json.dumps(v).encode("utf-8"),
            key_serializer=lambda v: (v.encode("utf-8") if isinstance(v, str) else v),
            linger_ms=10,
            retries=5,
            max_block_ms=timeout_ms,
            request_timeout_ms=timeout_ms,
            api_version_auto_timeout_ms=timeout_ms,
        )
    return _producer

def send(key: str, value: dict, topic: str | None = None):
    """Publish an order event. Best-effort: broker failures are logged, not raised.

    After a failure, events are dropped for KAFKA_RETRY_BACKOFF_SECONDS so an
    unreachable broker costs at most one bounded wait per backoff window.
    """
    global _retry_after
    if not settings.EVENTS_ENABLED:
        return
    if time.monotonic() < _retry_after:
        logger.debug(f"Broker backoff active, dropping {value.get('type')} for order {key}")
        return
    try:
        p = get_producer()
        p.send(topic or settings.TOPIC_ORDER_EVENTS, key=key, value=value)
        p.flush(settings.KAFKA_TIMEOUT_MS / 1000)
    except KafkaError as e:
        _retry_after = time.monotonic() + settings.KAFKA_RETRY_BACKOFF_SECONDS
        logger.warning(f"Could not publish {value.get('type')} for order {key}: {e}")

def close():
    global _producer, _retry_after
    if _producer is not None:
        _producer.close(timeout=5)
        _producer = None
    _retry_after = 0.0
