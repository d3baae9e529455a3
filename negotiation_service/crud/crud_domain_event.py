# negotiation_service/crud/crud_domain_event.py
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from sqlalchemy.orm import Session

from negotiation_service.models.domain_event import NegotiationDomainEvent


def create_event(
    db: Session,
    *,
    request_id: str,
    event_type: str,
    user_id: Optional[str],
    data: Optional[Dict[str, Any]] = None,
) -> NegotiationDomainEvent:
    db_obj = NegotiationDomainEvent(
        request_id=request_id,
        event_type=event_type,
        user_id=user_id,
        data=data,
        publish_attempts=0,
    )
    db.add(db_obj)
    db.flush()
    return db_obj


def get_for_request(db: Session, *, request_id: str) -> List[NegotiationDomainEvent]:
    return (
        db.query(NegotiationDomainEvent)
        .filter(NegotiationDomainEvent.request_id == request_id)
        .order_by(NegotiationDomainEvent.created_at.asc(), NegotiationDomainEvent.id)
        .all()
    )


def get_unpublished(
    db: Session,
    *,
    batch_size: int = 100,
    max_attempts: int = 10,
) -> List[NegotiationDomainEvent]:
    """Oldest unpublished events; rows locked by another relay are skipped."""
    return (
        db.query(NegotiationDomainEvent)
        .filter(
            NegotiationDomainEvent.published_at.is_(None),
            NegotiationDomainEvent.publish_attempts < max_attempts,
        )
        .order_by(NegotiationDomainEvent.created_at.asc(), NegotiationDomainEvent.id)
        .limit(batch_size)
        .with_for_update(skip_locked=True)
        .all()
    )


def mark_published(db: Session, *, event: NegotiationDomainEvent) -> None:
    event.published_at = datetime.now(timezone.utc)
    event.publish_attempts = (event.publish_attempts or 0) + 1


def mark_failed_attempt(db: Session, *, event: NegotiationDomainEvent) -> None:
    event.publish_attempts = (event.publish_attempts or 0) + 1
