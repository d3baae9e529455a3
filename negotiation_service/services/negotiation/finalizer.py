# negotiation_service/services/negotiation/finalizer.py
"""
Agreement finalization.

Turns a mutually accepted card into a locked engagement:

  1. resolve the provider to assign
  2. create the `agreement` card (child of the original, same terms)
  3. mark the original card `accepted`
  4. lock the request (`agreed`, `is_agreement_locked`, `provider_id`)

All four writes run in the caller's transaction under the request row lock.
Each step is flushed in order so the lock is always the last write, and every
step is safe to re-apply: an existing agreement card is reused and
re-marking `accepted` is a no-op.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from negotiation_service.core.exceptions import (
    AlreadyLockedError,
    MutualAcceptanceRequiredError,
    StaleProposalError,
)
from negotiation_service.crud import crud_proposal_card, crud_response_record, crud_service_provider
from negotiation_service.models.proposal_card import ProposalCard
from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.schemas.proposal_card import CardStatus
from negotiation_service.services.negotiation import participants, proposal_store, status_machine
from negotiation_service.services.negotiation.mutual_acceptance import (
    accepting_actors,
    has_mutual_acceptance,
)

logger = logging.getLogger(__name__)

FINALIZABLE_CARD_STATUSES = {CardStatus.PENDING.value, CardStatus.ACCEPTED.value}


def _resolve_provider_id(
    db: Session,
    request: ServiceRequest,
    card: ProposalCard,
    provider_actor: Optional[str],
    acceptors: set,
) -> Optional[str]:
    if request.provider_id:
        return request.provider_id

    provider = crud_service_provider.get_by_user_id(db, card.submitted_by)
    if provider:
        return provider.id

    candidates = [provider_actor] if provider_actor else []
    candidates += sorted(acceptors - {request.organizer_id, provider_actor})
    for actor_id in candidates:
        provider = crud_service_provider.get_by_user_id(db, actor_id)
        if provider:
            return provider.id

    return None


def apply(
    db: Session,
    *,
    request: ServiceRequest,
    card: ProposalCard,
    actor_id: str,
) -> Tuple[ProposalCard, str]:
    """
    Finalize `card` on an already row-locked `request`.

    Returns the agreement card and the request's previous status.
    Raises AlreadyLockedError when the request is locked; callers decide
    whether that is an idempotent no-op.
    """
    if request.is_agreement_locked:
        raise AlreadyLockedError(request.id)
    status_machine.ensure_negotiable(request)

    if card.status not in FINALIZABLE_CARD_STATUSES:
        current = crud_proposal_card.get_pending_for_request(db, request.id)
        raise StaleProposalError(request.id, card.id, current.id if current else None)

    responses = crud_response_record.list_for_card(db, card.id)
    provider_actor = participants.provider_actor_id(db, request, card)
    if not has_mutual_acceptance(responses, request.organizer_id, provider_actor):
        raise MutualAcceptanceRequiredError(card.id)

    provider_id = _resolve_provider_id(
        db, request, card, provider_actor, accepting_actors(responses)
    )
    if provider_id is None:
        logger.warning(
            f"Finalizing request {request.id} without a provider: no provider entity "
            f"found for card {card.id} (submitted by {card.submitted_by})"
        )

    agreement = crud_proposal_card.get_agreement_for(db, card.id)
    if agreement is None:
        agreement = proposal_store.create_agreement_card(
            db, request=request, original=card, author_id=actor_id
        )

    proposal_store.mark_status(db, card, CardStatus.ACCEPTED.value)

    old_status = status_machine.mark_agreed(request, provider_id)
    db.flush()

    logger.info(
        f"Request {request.id} finalized on card #{card.card_number}; "
        f"agreement card #{agreement.card_number}, provider {provider_id}"
    )
    return agreement, old_status
