# negotiation_service/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships
# Order matters for dependencies - import base models first

from negotiation_service.db.base_class import Base
from negotiation_service.models.service_provider import ServiceProvider
from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.models.proposal_card import ProposalCard
from negotiation_service.models.response_record import ResponseRecord
from negotiation_service.models.request_comment import RequestComment
from negotiation_service.models.project_completion import ProjectCompletion
from negotiation_service.models.negotiation_audit_log import NegotiationAuditLog
from negotiation_service.models.domain_event import NegotiationDomainEvent

__all__ = [
    "Base",
    "ServiceProvider",
    "ServiceRequest",
    "ProposalCard",
    "ResponseRecord",
    "RequestComment",
    "ProjectCompletion",
    "NegotiationAuditLog",
    "NegotiationDomainEvent",
]
