# negotiation_service/graphql/negotiation_queries.py
"""GraphQL negotiation queries, called from the main Query class."""
from typing import Optional

from graphql import GraphQLError
from strawberry.types import Info

from ..core.exceptions import NegotiationError
from ..schemas.proposal_card import ProposalCardOut, ResponseRecordOut, ThreadCard
from ..services.negotiation import negotiation_engine
from .negotiation_types import (
    CardStatusEnum,
    NegotiationThreadType,
    ProposalCardType,
    RequestStatusEnum,
    ResponseRecordType,
    ResponseTypeEnum,
    ServiceRequestType,
)


def _get_user(info: Info):
    user = info.context.user
    if not user:
        raise GraphQLError("Not authorized", extensions={"code": "UNAUTHENTICATED"})
    return user


def _to_graphql_error(exc: NegotiationError) -> GraphQLError:
    return GraphQLError(exc.message, extensions={"code": exc.error_code, **exc.details})


def _request_to_gql(request) -> ServiceRequestType:
    return ServiceRequestType(
        id=request.id,
        organizerId=request.organizer_id,
        providerId=request.provider_id,
        title=request.title,
        description=request.description,
        budgetRange=request.budget_range,
        timeline=request.timeline,
        status=RequestStatusEnum(request.status),
        isAgreementLocked=request.is_agreement_locked,
        createdAt=request.created_at,
        updatedAt=request.updated_at,
    )


def _response_to_gql(resp: ResponseRecordOut) -> ResponseRecordType:
    return ResponseRecordType(
        id=resp.id,
        cardId=resp.card_id,
        respondedBy=resp.responded_by,
        responseType=ResponseTypeEnum(resp.response_type.value),
        responseNotes=resp.response_notes,
        createdAt=resp.created_at,
    )


def _card_to_gql(card: ProposalCardOut) -> Optional[ProposalCardType]:
    """Convert a ProposalCardOut (or ThreadCard) to GQL type."""
    if card is None:
        return None

    responses = card.responses if isinstance(card, ThreadCard) else []
    return ProposalCardType(
        id=card.id,
        requestId=card.request_id,
        submittedBy=card.submitted_by,
        cardNumber=card.card_number,
        status=CardStatusEnum(card.status.value),
        negotiatedTitle=card.negotiated_title,
        negotiatedDescription=card.negotiated_description,
        negotiatedBudgetRange=card.negotiated_budget_range,
        negotiatedTimeline=card.negotiated_timeline,
        responseToCardId=card.response_to_card_id,
        createdAt=card.created_at,
        responses=[_response_to_gql(r) for r in responses],
    )


# ── Queries ───────────────────────────────────────────────────────────

def service_request_query(id: str, info: Info) -> Optional[ServiceRequestType]:
    _get_user(info)
    try:
        request = negotiation_engine.get_request(info.context.db, id)
    except NegotiationError:
        return None
    return _request_to_gql(request)


def negotiation_thread_query(requestId: str, info: Info) -> NegotiationThreadType:
    _get_user(info)
    try:
        thread = negotiation_engine.get_thread(info.context.db, requestId)
    except NegotiationError as e:
        raise _to_graphql_error(e)

    return NegotiationThreadType(
        requestId=thread.request_id,
        requestStatus=RequestStatusEnum(thread.request_status),
        isAgreementLocked=thread.is_agreement_locked,
        cards=[_card_to_gql(c) for c in thread.cards],
        currentCard=_card_to_gql(thread.current_card),
    )
