# negotiation_service/crud/crud_audit_log.py
"""
CRUD operations for the negotiation audit trail.
Entries are flushed inside the caller's transaction so that an audit row
exists if and only if the audited change committed.
"""
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session

from negotiation_service.models.negotiation_audit_log import NegotiationAuditLog


def create_audit_entry(
    db: Session,
    *,
    request_id: str,
    user_id: str,
    action: str,
    old_state: Optional[str] = None,
    new_state: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    card_id: Optional[str] = None,
) -> NegotiationAuditLog:
    """Create an audit log entry."""
    entry = NegotiationAuditLog(
        request_id=request_id,
        card_id=card_id,
        user_id=user_id,
        action=action,
        old_state=old_state,
        new_state=new_state,
        action_metadata=metadata,  # Map parameter 'metadata' to column 'action_metadata'
    )
    db.add(entry)
    db.flush()
    return entry


def get_audit_log_for_request(
    db: Session,
    request_id: str,
    limit: int = 100,
) -> List[NegotiationAuditLog]:
    """Get audit trail for a service request, newest first."""
    return (
        db.query(NegotiationAuditLog)
        .filter(NegotiationAuditLog.request_id == request_id)
        .order_by(NegotiationAuditLog.created_at.desc(), NegotiationAuditLog.id)
        .limit(limit)
        .all()
    )
