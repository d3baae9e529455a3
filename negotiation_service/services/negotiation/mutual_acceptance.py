# negotiation_service/services/negotiation/mutual_acceptance.py
from typing import Iterable, Optional

from negotiation_service.schemas.proposal_card import ResponseType


def accepting_actors(responses: Iterable) -> set:
    """Distinct actor ids that recorded an `accept` response."""
    return {
        r.responded_by
        for r in responses
        if r.response_type == ResponseType.ACCEPT.value
    }


def has_mutual_acceptance(
    responses: Iterable,
    organizer_id: str,
    provider_actor_id: Optional[str] = None,
) -> bool:
    """
    True iff both sides of the request accepted the same card.

    `responses` are the ResponseRecords of a single card. The organizer must be
    among the acceptors, together with the provider-side actor. While no
    provider-side actor is known (open request, organizer-only chain) any
    acceptor other than the organizer stands for the provider side. Two
    accepts from the same side never count.
    """
    acceptors = accepting_actors(responses)
    if organizer_id not in acceptors:
        return False

    if provider_actor_id is not None:
        if provider_actor_id == organizer_id:
            return False
        return provider_actor_id in acceptors

    return len(acceptors - {organizer_id}) >= 1
