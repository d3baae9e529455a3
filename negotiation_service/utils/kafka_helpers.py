# negotiation_service/utils/kafka_helpers.py
"""
Kafka helper functions for publishing negotiation events.
Uses the singleton producer from negotiation_service.core.kafka_producer.
"""
import logging

from negotiation_service.core.config import settings
from negotiation_service.core.kafka_producer import get_kafka_singleton

logger = logging.getLogger(__name__)


def build_event_message(event) -> dict:
    """Wire format of a NegotiationDomainEvent row."""
    return {
        "id": event.id,
        "type": event.event_type,
        "requestId": event.request_id,
        "userId": event.user_id,
        "data": event.data or {},
        "createdAt": event.created_at.isoformat() if event.created_at else None,
    }


def publish_negotiation_event(event) -> bool:
    """
    Publish one outbox row to the negotiation events topic.

    Messages are keyed by request id so that every event of a request lands
    on the same partition, in commit order.

    Returns:
        bool: True if published successfully, False otherwise
    """
    try:
        producer = get_kafka_singleton()

        if producer is None:
            logger.warning("Kafka producer unavailable, skipping event publish")
            return False

        future = producer.send(
            settings.NEGOTIATION_EVENTS_TOPIC,
            key=event.request_id,
            value=build_event_message(event),
        )
        # Wait for the send to complete (with timeout)
        future.get(timeout=10)

        logger.info(f"Published {event.event_type} for request {event.request_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish negotiation event {event.id}: {e}", exc_info=True)
        return False
