# negotiation_service/models/domain_event.py
import uuid
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index, func, text
from negotiation_service.db.base_class import Base, JSONType


class NegotiationDomainEvent(Base):
    """
    Outbox row for a negotiation domain event.

    Written in the same transaction as the change that raised it and relayed
    to Kafka afterwards; `published_at` stays NULL until a relay succeeds.
    """

    __tablename__ = "negotiation_domain_events"

    id = Column(String, primary_key=True, default=lambda: f"nde_{uuid.uuid4().hex[:12]}")
    request_id = Column(
        String, ForeignKey("service_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_type = Column(String, nullable=False)  # e.g. "ProposalCreated", "AgreementFinalized"
    user_id = Column(String, nullable=True)  # The actor who caused the event
    data = Column(JSONType, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    publish_attempts = Column(Integer, nullable=False, default=0, server_default=text("0"))

    __table_args__ = (
        Index("ix_negotiation_domain_events_unpublished", "published_at", "created_at"),
    )
