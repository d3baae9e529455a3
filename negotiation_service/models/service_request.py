# negotiation_service/models/service_request.py
import uuid
from sqlalchemy import (
    Column, String, Text, Boolean, Integer, DateTime, ForeignKey, Index, text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from negotiation_service.db.base_class import Base, JSONType


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id = Column(
        String, primary_key=True, default=lambda: f"srq_{uuid.uuid4().hex[:12]}"
    )
    organizer_id = Column(String, nullable=False, index=True)
    provider_id = Column(
        String,
        ForeignKey("service_providers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    budget_range = Column(JSONType, nullable=True)  # {"min", "max", "currency"}
    timeline = Column(String, nullable=True)

    # Lifecycle
    status = Column(String, nullable=False, server_default=text("'pending'"))
    is_agreement_locked = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    # Last allocated proposal card number; advanced by a conditional UPDATE
    card_sequence = Column(
        Integer, nullable=False, default=0, server_default=text("0")
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
    provider = relationship("ServiceProvider")
    cards = relationship(
        "ProposalCard",
        back_populates="request",
        order_by="ProposalCard.card_number",
    )
    comments = relationship(
        "RequestComment",
        back_populates="request",
        order_by="RequestComment.created_at",
    )
    completion = relationship(
        "ProjectCompletion", back_populates="request", uselist=False
    )

    __table_args__ = (
        Index("ix_service_requests_organizer_status", "organizer_id", "status"),
    )
