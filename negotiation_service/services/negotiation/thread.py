# negotiation_service/services/negotiation/thread.py
"""Read model of a negotiation: cards in card_number order with their responses."""
from typing import List, Optional

from sqlalchemy.orm import Session

from negotiation_service.crud import crud_proposal_card
from negotiation_service.models.proposal_card import ProposalCard
from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.schemas.proposal_card import (
    CardStatus,
    NegotiationThreadOut,
    ThreadCard,
)


def current_pending(cards: List[ProposalCard]) -> Optional[ProposalCard]:
    pending = [c for c in cards if c.status == CardStatus.PENDING.value]
    return pending[-1] if pending else None


def build_thread(db: Session, request: ServiceRequest) -> NegotiationThreadOut:
    cards = crud_proposal_card.list_for_request(db, request.id)
    current = current_pending(cards)

    thread_cards = [ThreadCard.model_validate(card) for card in cards]
    current_out = None
    if current is not None:
        current_out = next(c for c in thread_cards if c.id == current.id)

    return NegotiationThreadOut(
        request_id=request.id,
        request_status=request.status,
        is_agreement_locked=request.is_agreement_locked,
        cards=thread_cards,
        current_card=current_out,
    )
