# negotiation_service/schemas/service_request.py
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum


# --- Enums ---

class RequestStatus(str, Enum):
    PENDING = "pending"
    NEGOTIATING = "negotiating"
    AGREED = "agreed"
    IN_PROGRESS = "in_progress"
    PENDING_REVIEW = "pending_review"
    COMPLETED = "completed"
    DECLINED = "declined"
    CANCELLED = "cancelled"


# --- Shared value objects ---

class BudgetRange(BaseModel):
    min: Optional[Decimal] = Field(None, ge=0)
    max: Optional[Decimal] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)

    @model_validator(mode="after")
    def validate_range(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("budget min must be <= budget max")
        return self

    def to_json(self) -> dict:
        """JSON-column friendly representation (Decimal -> float)."""
        return {
            "min": float(self.min) if self.min is not None else None,
            "max": float(self.max) if self.max is not None else None,
            "currency": self.currency.upper(),
        }


# --- Create / Actions ---

class ServiceRequestCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    budget_range: Optional[BudgetRange] = None
    timeline: Optional[str] = Field(None, max_length=200)
    # Direct request to a known provider; omitted for open-market requests
    provider_id: Optional[str] = None


class CancelRequestBody(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


class DeclineAssignmentBody(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


class DeliverablesSubmission(BaseModel):
    deliverables: List[str] = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=2000)


# --- Responses ---

class ServiceRequestResponse(BaseModel):
    id: str
    organizer_id: str
    provider_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    budget_range: Optional[dict] = None
    timeline: Optional[str] = None
    status: RequestStatus
    is_agreement_locked: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ServiceRequestListResult(BaseModel):
    service_requests: List[ServiceRequestResponse]
    total_count: int
    total_pages: int
