# negotiation_service/graphql/queries.py
import strawberry
from typing import Optional

from .negotiation_queries import negotiation_thread_query, service_request_query
from .negotiation_types import NegotiationThreadType, ServiceRequestType


@strawberry.type
class Query:
    serviceRequest: Optional[ServiceRequestType] = strawberry.field(resolver=service_request_query)
    negotiationThread: NegotiationThreadType = strawberry.field(resolver=negotiation_thread_query)
