# negotiation_service/utils/realtime.py
"""
In-app push of negotiation events via Redis pub/sub.
Subscribers listen on `<prefix>:<request_id>`; a failed publish never
affects the committed negotiation state.
"""
import json
import logging

from negotiation_service.core.config import settings
from negotiation_service.db.redis import redis_client
from negotiation_service.utils.kafka_helpers import build_event_message

logger = logging.getLogger(__name__)


def channel_for(request_id: str) -> str:
    return f"{settings.REALTIME_CHANNEL_PREFIX}:{request_id}"


def publish_realtime(event) -> bool:
    """Publish in-app notification via Redis pub/sub."""
    try:
        redis_client.publish(
            channel_for(event.request_id),
            json.dumps(build_event_message(event), default=str),
        )
        return True
    except Exception as e:
        logger.error(f"Failed to publish in-app notification: {e}", exc_info=True)
        return False
