# negotiation_service/crud/crud_response_record.py
from typing import Optional, List

from sqlalchemy.orm import Session

from negotiation_service.models.response_record import ResponseRecord


def get_by_card_and_actor(db: Session, card_id: str, actor_id: str) -> Optional[ResponseRecord]:
    return (
        db.query(ResponseRecord)
        .filter(
            ResponseRecord.card_id == card_id,
            ResponseRecord.responded_by == actor_id,
        )
        .first()
    )


def list_for_card(db: Session, card_id: str) -> List[ResponseRecord]:
    return (
        db.query(ResponseRecord)
        .filter(ResponseRecord.card_id == card_id)
        .order_by(ResponseRecord.created_at.asc(), ResponseRecord.id)
        .all()
    )


def insert(
    db: Session,
    *,
    card_id: str,
    responded_by: str,
    response_type: str,
    response_notes: Optional[str] = None,
) -> ResponseRecord:
    """
    Insert a response and flush immediately so that the
    uq_card_response_actor constraint fires here (IntegrityError).
    """
    record = ResponseRecord(
        card_id=card_id,
        responded_by=responded_by,
        response_type=response_type,
        response_notes=response_notes,
    )
    db.add(record)
    db.flush()
    return record
