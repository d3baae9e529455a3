# negotiation_service/graphql/mutations.py
import strawberry

from .negotiation_mutations import (
    cancel_service_request_mutation,
    respond_to_proposal_mutation,
    submit_proposal_mutation,
)
from .negotiation_types import ProposalCardType, RespondResultType, ServiceRequestType


@strawberry.type
class Mutation:
    submitProposal: ProposalCardType = strawberry.mutation(resolver=submit_proposal_mutation)
    respondToProposal: RespondResultType = strawberry.mutation(resolver=respond_to_proposal_mutation)
    cancelServiceRequest: ServiceRequestType = strawberry.mutation(
        resolver=cancel_service_request_mutation
    )
