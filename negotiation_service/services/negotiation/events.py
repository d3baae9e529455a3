# negotiation_service/services/negotiation/events.py
"""
Domain events of the negotiation engine.

Events are written to the outbox inside the operation's transaction and
published after commit. Publishing is best-effort: anything that fails here
stays unpublished and is picked up by the outbox relay.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from negotiation_service.crud import crud_domain_event
from negotiation_service.models.domain_event import NegotiationDomainEvent
from negotiation_service.schemas.domain_event import NegotiationEventType
from negotiation_service.utils.kafka_helpers import publish_negotiation_event
from negotiation_service.utils.realtime import publish_realtime

logger = logging.getLogger(__name__)


def record(
    db: Session,
    *,
    request_id: str,
    event_type: NegotiationEventType,
    user_id: Optional[str],
    data: Optional[Dict[str, Any]] = None,
) -> NegotiationDomainEvent:
    return crud_domain_event.create_event(
        db,
        request_id=request_id,
        event_type=NegotiationEventType(event_type).value,
        user_id=user_id,
        data=data,
    )


def publish_committed(db: Session, pending: List[NegotiationDomainEvent]) -> None:
    """Push freshly committed events to Kafka and Redis. Never raises."""
    if not pending:
        return

    try:
        for event in pending:
            publish_realtime(event)
            if publish_negotiation_event(event):
                crud_domain_event.mark_published(db, event=event)
            else:
                crud_domain_event.mark_failed_attempt(db, event=event)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to publish committed negotiation events: {e}", exc_info=True)
