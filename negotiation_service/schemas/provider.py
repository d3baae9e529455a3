# negotiation_service/schemas/provider.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ServiceProviderCreate(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=300)


class ServiceProviderOut(BaseModel):
    id: str
    user_id: str
    business_name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
