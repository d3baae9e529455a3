# negotiation_service/models/negotiation_audit_log.py
"""
Audit trail for negotiation state changes.
Tracks every critical action: create, propose, respond, finalize, cancel, etc.
"""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, text
from sqlalchemy.sql import func
from negotiation_service.db.base_class import Base, JSONType


class NegotiationAuditLog(Base):
    __tablename__ = "negotiation_audit_log"

    id = Column(
        String, primary_key=True, default=lambda: f"nal_{uuid.uuid4().hex[:12]}"
    )
    request_id = Column(
        String,
        ForeignKey("service_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    card_id = Column(
        String, ForeignKey("proposal_cards.id", ondelete="SET NULL"), nullable=True
    )
    user_id = Column(String, nullable=False, index=True)

    # Action details
    action = Column(String(50), nullable=False, index=True)
    old_state = Column(String(50), nullable=True)
    new_state = Column(String(50), nullable=True)
    action_metadata = Column(JSONType, nullable=True)  # 'metadata' is reserved by SQLAlchemy

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("idx_negotiation_audit_request_created", "request_id", text("created_at DESC")),
    )
