# negotiation_service/services/negotiation/proposal_store.py
"""
Proposal card store: append-only cards with a monotonic status field.

Callers must hold the service request row lock
(crud_service_request.get_for_update) before calling `create_card`.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from negotiation_service.core.exceptions import (
    InvalidCardTransitionError,
    LockedRequestError,
    StaleProposalError,
)
from negotiation_service.crud import crud_proposal_card, crud_service_request
from negotiation_service.models.proposal_card import ProposalCard
from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.schemas.proposal_card import CardStatus, ProposalTerms
from negotiation_service.services.negotiation.status_machine import ensure_negotiable

logger = logging.getLogger(__name__)

# pending is the only status a card can leave
VALID_CARD_TRANSITIONS = {
    CardStatus.PENDING.value: {
        CardStatus.ACCEPTED.value,
        CardStatus.COUNTERED.value,
        CardStatus.CANCELLED.value,
    },
}


def create_card(
    db: Session,
    *,
    request: ServiceRequest,
    author_id: str,
    terms: ProposalTerms,
    responds_to: Optional[str] = None,
) -> ProposalCard:
    """
    Append a new pending card to `request`.

    With `responds_to`, the referenced card must be the request's current
    pending card; without it, no card may be pending. The predecessor's
    status is left untouched: the response ledger marks it `countered` in
    the same transaction.
    """
    ensure_negotiable(request)

    current = crud_proposal_card.get_pending_for_request(db, request.id)
    current_id = current.id if current else None
    if responds_to != current_id:
        raise StaleProposalError(request.id, responds_to, current_id)

    card_number = crud_service_request.allocate_card_number(db, request.id)
    if card_number is None:
        raise LockedRequestError(request.id)

    card = crud_proposal_card.insert(
        db,
        request_id=request.id,
        submitted_by=author_id,
        card_number=card_number,
        status=CardStatus.PENDING.value,
        negotiated_title=terms.title,
        negotiated_description=terms.description,
        negotiated_budget_range=terms.budget_range.to_json() if terms.budget_range else None,
        negotiated_timeline=terms.timeline,
        response_to_card_id=responds_to,
    )
    logger.info(
        f"Created proposal card #{card.card_number} ({card.id}) on request {request.id}"
        + (f" responding to {responds_to}" if responds_to else "")
    )
    return card


def create_agreement_card(
    db: Session,
    *,
    request: ServiceRequest,
    original: ProposalCard,
    author_id: str,
) -> ProposalCard:
    """Finalization card: same terms as `original`, status `agreement`."""
    card_number = crud_service_request.allocate_card_number(db, request.id)
    if card_number is None:
        raise LockedRequestError(request.id)

    return crud_proposal_card.insert(
        db,
        request_id=request.id,
        submitted_by=author_id,
        card_number=card_number,
        status=CardStatus.AGREEMENT.value,
        negotiated_title=original.negotiated_title,
        negotiated_description=original.negotiated_description,
        negotiated_budget_range=original.negotiated_budget_range,
        negotiated_timeline=original.negotiated_timeline,
        response_to_card_id=original.id,
    )


def mark_status(db: Session, card: ProposalCard, status: str) -> bool:
    """
    Move `card` to `status`. Returns False when the card already has that
    status (idempotent re-application), True when it changed.
    Terminal cards never move to a different status.
    """
    status = CardStatus(status).value
    if card.status == status:
        return False

    allowed = VALID_CARD_TRANSITIONS.get(card.status, set())
    if status not in allowed:
        raise InvalidCardTransitionError(card.id, card.status, status)

    card.status = status
    db.flush()
    return True
