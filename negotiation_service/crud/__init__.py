# negotiation_service/crud/__init__.py
from . import (
    crud_service_request,
    crud_proposal_card,
    crud_response_record,
    crud_request_comment,
    crud_service_provider,
    crud_project_completion,
    crud_audit_log,
    crud_domain_event,
)
