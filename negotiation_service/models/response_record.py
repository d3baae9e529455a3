# negotiation_service/models/response_record.py
import uuid
from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from negotiation_service.db.base_class import Base


class ResponseRecord(Base):
    __tablename__ = "proposal_card_responses"

    id = Column(
        String, primary_key=True, default=lambda: f"rsp_{uuid.uuid4().hex[:12]}"
    )
    card_id = Column(
        String,
        ForeignKey("proposal_cards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    responded_by = Column(String, nullable=False)
    response_type = Column(String, nullable=False)  # accept, reject, counter, cancel
    response_notes = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    card = relationship("ProposalCard", back_populates="responses")

    __table_args__ = (
        # One response per actor per card, enforced by the database
        UniqueConstraint("card_id", "responded_by", name="uq_card_response_actor"),
    )
