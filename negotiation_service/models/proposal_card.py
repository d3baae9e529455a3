# negotiation_service/models/proposal_card.py
import uuid
from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from negotiation_service.db.base_class import Base, JSONType


class ProposalCard(Base):
    """
    One versioned snapshot of negotiated terms.

    Cards are append-only: after insert only `status` changes, and only
    from `pending` to a terminal value.
    """

    __tablename__ = "proposal_cards"

    id = Column(
        String, primary_key=True, default=lambda: f"crd_{uuid.uuid4().hex[:12]}"
    )
    request_id = Column(
        String,
        ForeignKey("service_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    submitted_by = Column(String, nullable=False)  # actor (user) id
    card_number = Column(Integer, nullable=False)
    status = Column(String, nullable=False)  # pending, accepted, countered, cancelled, agreement

    # Negotiated terms snapshot
    negotiated_title = Column(String, nullable=True)
    negotiated_description = Column(Text, nullable=True)
    negotiated_budget_range = Column(JSONType, nullable=True)
    negotiated_timeline = Column(String, nullable=True)

    response_to_card_id = Column(
        String, ForeignKey("proposal_cards.id"), nullable=True
    )

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    request = relationship("ServiceRequest", back_populates="cards")
    response_to = relationship("ProposalCard", remote_side=[id])
    responses = relationship(
        "ResponseRecord",
        back_populates="card",
        order_by="ResponseRecord.created_at",
    )

    __table_args__ = (
        UniqueConstraint("request_id", "card_number", name="uq_proposal_card_number"),
        Index("ix_proposal_cards_request_status", "request_id", "status"),
    )
