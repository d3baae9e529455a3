# negotiation_service/graphql/negotiation_mutations.py
"""GraphQL negotiation mutations, called from the main Mutation class."""
from typing import Optional

from strawberry.types import Info

from ..core.exceptions import NegotiationError
from ..schemas.proposal_card import ProposalCardOut, ProposalTerms
from ..schemas.service_request import BudgetRange
from ..services.negotiation import negotiation_engine
from .negotiation_queries import (
    _card_to_gql,
    _get_user,
    _request_to_gql,
    _response_to_gql,
    _to_graphql_error,
)
from .negotiation_types import (
    ProposalCardType,
    ProposalTermsInput,
    RequestStatusEnum,
    RespondResultType,
    ResponseTypeEnum,
    ServiceRequestType,
)


def _terms_from_input(terms: Optional[ProposalTermsInput]) -> Optional[ProposalTerms]:
    if terms is None:
        return None

    budget = None
    if terms.budgetRange is not None:
        budget = BudgetRange(
            min=terms.budgetRange.min,
            max=terms.budgetRange.max,
            currency=terms.budgetRange.currency,
        )
    return ProposalTerms(
        title=terms.title,
        description=terms.description,
        budget_range=budget,
        timeline=terms.timeline,
    )


def submit_proposal_mutation(
    requestId: str,
    terms: ProposalTermsInput,
    info: Info,
    respondsTo: Optional[str] = None,
) -> ProposalCardType:
    user = _get_user(info)
    try:
        card = negotiation_engine.submit_proposal(
            info.context.db,
            request_id=requestId,
            actor_id=user.sub,
            terms=_terms_from_input(terms),
            responds_to=respondsTo,
        )
    except NegotiationError as e:
        raise _to_graphql_error(e)
    return _card_to_gql(ProposalCardOut.model_validate(card))


def respond_to_proposal_mutation(
    cardId: str,
    responseType: ResponseTypeEnum,
    info: Info,
    notes: Optional[str] = None,
    counterTerms: Optional[ProposalTermsInput] = None,
) -> RespondResultType:
    user = _get_user(info)
    try:
        result = negotiation_engine.respond(
            info.context.db,
            card_id=cardId,
            actor_id=user.sub,
            response_type=responseType.value,
            notes=notes,
            counter_terms=_terms_from_input(counterTerms),
        )
    except NegotiationError as e:
        raise _to_graphql_error(e)

    return RespondResultType(
        response=_response_to_gql(result.response),
        card=_card_to_gql(result.card),
        counterCard=_card_to_gql(result.counter_card),
        agreementCard=_card_to_gql(result.agreement_card),
        requestStatus=RequestStatusEnum(result.request_status),
    )


def cancel_service_request_mutation(
    id: str,
    info: Info,
    reason: Optional[str] = None,
) -> ServiceRequestType:
    user = _get_user(info)
    try:
        request = negotiation_engine.cancel_request(
            info.context.db, request_id=id, actor_id=user.sub, reason=reason
        )
    except NegotiationError as e:
        raise _to_graphql_error(e)
    return _request_to_gql(request)
