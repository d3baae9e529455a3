# negotiation_service/services/negotiation/participants.py
"""
Who is on which side of a negotiation.

The organizer is always `ServiceRequest.organizer_id`. The provider side is
resolved, in order, from:
  1. the user owning the assigned ServiceProvider,
  2. the nearest non-organizer submitter walking the card chain backwards,
  3. the first non-organizer responder along that chain.
Until one of these exists (open-market request, organizer-only chain) any
actor other than the organizer may speak for the provider side.
"""
from typing import Optional

from sqlalchemy.orm import Session

from negotiation_service.core.exceptions import NotParticipantError
from negotiation_service.crud import crud_proposal_card, crud_response_record, crud_service_provider
from negotiation_service.models.proposal_card import ProposalCard
from negotiation_service.models.service_request import ServiceRequest


def provider_actor_id(
    db: Session,
    request: ServiceRequest,
    card: Optional[ProposalCard] = None,
) -> Optional[str]:
    if request.provider_id:
        provider = crud_service_provider.get(db, request.provider_id)
        if provider:
            return provider.user_id

    if card is None:
        card = crud_proposal_card.get_latest_for_request(db, request.id)
    if card is None:
        return None

    chain = []
    node = card
    while node is not None and node not in chain:
        chain.append(node)
        node = node.response_to

    for node in chain:
        if node.submitted_by != request.organizer_id:
            return node.submitted_by

    for node in chain:
        for response in crud_response_record.list_for_card(db, node.id):
            if response.responded_by != request.organizer_id:
                return response.responded_by
    return None


def ensure_participant(
    db: Session,
    request: ServiceRequest,
    actor_id: str,
    card: Optional[ProposalCard] = None,
    action: str = "negotiate",
) -> None:
    if actor_id == request.organizer_id:
        return
    provider_actor = provider_actor_id(db, request, card)
    if provider_actor is not None and provider_actor != actor_id:
        raise NotParticipantError(request.id, actor_id, action)


def ensure_organizer(request: ServiceRequest, actor_id: str, action: str) -> None:
    if actor_id != request.organizer_id:
        raise NotParticipantError(request.id, actor_id, action)


def ensure_provider(db: Session, request: ServiceRequest, actor_id: str, action: str) -> None:
    """The actor must be the provider side of an agreed engagement."""
    if actor_id == request.organizer_id or provider_actor_id(db, request) != actor_id:
        raise NotParticipantError(request.id, actor_id, action)
