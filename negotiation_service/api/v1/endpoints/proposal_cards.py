# negotiation_service/api/v1/endpoints/proposal_cards.py
"""Responding to and finalizing proposal cards."""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from negotiation_service.api import deps
from negotiation_service.core.limiter import limiter
from negotiation_service.db.session import get_db
from negotiation_service.schemas.proposal_card import (
    FinalizeResult,
    ProposalResponseCreate,
    RespondResult,
)
from negotiation_service.schemas.token import TokenPayload
from negotiation_service.services.negotiation import negotiation_engine

router = APIRouter(prefix="/proposal-cards", tags=["Proposal Cards"])


@router.post(
    "/{card_id}/responses",
    response_model=RespondResult,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
def respond_to_proposal(
    request: Request,
    card_id: str,
    body: ProposalResponseCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Accept, reject, counter or withdraw a pending card.

    A second response by the same caller on the same card returns 409.
    When both parties have accepted, the engagement is finalized in the same
    call and `agreement_card` is set.
    """
    return negotiation_engine.respond(
        db,
        card_id=card_id,
        actor_id=current_user.sub,
        response_type=body.response_type.value,
        notes=body.notes,
        counter_terms=body.counter_terms,
    )


@router.post("/{card_id}/finalize", response_model=FinalizeResult)
@limiter.limit("10/minute")
def finalize_agreement(
    request: Request,
    card_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Finalize a mutually accepted card. Safe to call more than once."""
    return negotiation_engine.finalize(db, card_id=card_id, actor_id=current_user.sub)
