# negotiation_service/models/service_provider.py
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from negotiation_service.db.base_class import Base


class ServiceProvider(Base):
    __tablename__ = "service_providers"

    id = Column(
        String, primary_key=True, default=lambda: f"spv_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(String, nullable=False, unique=True, index=True)
    business_name = Column(String, nullable=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
