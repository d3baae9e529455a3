# negotiation_service/models/project_completion.py
import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from negotiation_service.db.base_class import Base, JSONType


class ProjectCompletion(Base):
    __tablename__ = "project_completions"

    id = Column(
        String, primary_key=True, default=lambda: f"pcm_{uuid.uuid4().hex[:12]}"
    )
    request_id = Column(
        String,
        ForeignKey("service_requests.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    submitted_by = Column(String, nullable=False)
    deliverables = Column(JSONType, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    status = Column(String, nullable=False)  # "submitted" | "confirmed"

    confirmed_by = Column(String, nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    # Relationships
    request = relationship("ServiceRequest", back_populates="completion")
