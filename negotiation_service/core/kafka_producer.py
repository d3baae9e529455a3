# negotiation_service/core/kafka_producer.py

import json
import logging
import threading
from typing import Optional

from kafka import KafkaProducer
from negotiation_service.core.config import settings

logger = logging.getLogger(__name__)

_producer: Optional[KafkaProducer] = None
_producer_lock = threading.Lock()


def _build_producer() -> KafkaProducer:
    return KafkaProducer(
        bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
        value_serializer=lambda v: json.dumps(v, default=str).encode("utf-8"),
        key_serializer=lambda k: k.encode("utf-8") if k is not None else None,
        # Fail fast when the broker is unreachable
        request_timeout_ms=5000,
    )


def get_kafka_singleton() -> Optional[KafkaProducer]:
    """
    Process-wide producer shared by the event publisher and the outbox relay.
    Returns None when no broker is reachable; callers treat that as a failed
    publish and leave the event for the relay.
    """
    global _producer

    if _producer is not None:
        return _producer

    with _producer_lock:
        if _producer is None:
            try:
                _producer = _build_producer()
            except Exception as e:
                logger.error(f"Could not connect Kafka producer: {e}")
                return None
    return _producer


def close_kafka_singleton() -> None:
    global _producer

    with _producer_lock:
        if _producer is not None:
            try:
                _producer.flush(timeout=5)
                _producer.close(timeout=5)
            except Exception as e:
                logger.warning(f"Error while closing Kafka producer: {e}")
            _producer = None
