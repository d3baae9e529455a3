# negotiation_service/models/request_comment.py
# Informational only; never consulted by the negotiation state machine.
import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from negotiation_service.db.base_class import Base


class RequestComment(Base):
    __tablename__ = "service_request_comments"

    id = Column(
        String, primary_key=True, default=lambda: f"cmt_{uuid.uuid4().hex[:12]}"
    )
    request_id = Column(
        String,
        ForeignKey("service_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id = Column(String, nullable=False)
    comment_type = Column(String, nullable=False)  # "general" | "status_update"
    content = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    request = relationship("ServiceRequest", back_populates="comments")
