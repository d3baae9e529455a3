# negotiation_service/services/negotiation/response_ledger.py
"""Response ledger: at most one response per (card, actor)."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from negotiation_service.core.exceptions import DuplicateResponseError
from negotiation_service.crud import crud_response_record
from negotiation_service.models.proposal_card import ProposalCard
from negotiation_service.models.response_record import ResponseRecord
from negotiation_service.schemas.proposal_card import ResponseType

logger = logging.getLogger(__name__)


def record_response(
    db: Session,
    *,
    card: ProposalCard,
    actor_id: str,
    response_type: str,
    notes: Optional[str] = None,
) -> ResponseRecord:
    """
    Append a response to `card`.

    The pre-read gives a clean error in the common case; the
    uq_card_response_actor constraint settles races between two concurrent
    responders. On IntegrityError the enclosing transaction is unusable and
    the caller rolls it back.
    """
    response_type = ResponseType(response_type).value

    existing = crud_response_record.get_by_card_and_actor(db, card.id, actor_id)
    if existing:
        raise DuplicateResponseError(card.id, actor_id)

    try:
        record = crud_response_record.insert(
            db,
            card_id=card.id,
            responded_by=actor_id,
            response_type=response_type,
            response_notes=notes,
        )
    except IntegrityError as e:
        logger.info(f"Concurrent duplicate response on card {card.id} by {actor_id}")
        raise DuplicateResponseError(card.id, actor_id) from e

    logger.info(f"Recorded {response_type} on card {card.id} by {actor_id}")
    return record
