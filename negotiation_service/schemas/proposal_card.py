# negotiation_service/schemas/proposal_card.py
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

from negotiation_service.schemas.service_request import BudgetRange


# --- Enums ---

class CardStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COUNTERED = "countered"
    CANCELLED = "cancelled"
    AGREEMENT = "agreement"


class ResponseType(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    COUNTER = "counter"
    CANCEL = "cancel"  # withdrawal by the card's own submitter


# --- Inputs ---

class ProposalTerms(BaseModel):
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    budget_range: Optional[BudgetRange] = None
    timeline: Optional[str] = Field(None, max_length=200)


class ProposalSubmission(BaseModel):
    terms: ProposalTerms
    responds_to: Optional[str] = None


class ProposalResponseCreate(BaseModel):
    response_type: ResponseType
    notes: Optional[str] = Field(None, max_length=2000)
    # Required when response_type == counter
    counter_terms: Optional[ProposalTerms] = None

    @model_validator(mode="after")
    def validate_counter_terms(self):
        if self.response_type == ResponseType.COUNTER and self.counter_terms is None:
            raise ValueError("counter_terms is required for a counter response")
        return self


# --- Outputs ---

class ResponseRecordOut(BaseModel):
    id: str
    card_id: str
    responded_by: str
    response_type: ResponseType
    response_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProposalCardOut(BaseModel):
    id: str
    request_id: str
    submitted_by: str
    card_number: int
    status: CardStatus
    negotiated_title: Optional[str] = None
    negotiated_description: Optional[str] = None
    negotiated_budget_range: Optional[dict] = None
    negotiated_timeline: Optional[str] = None
    response_to_card_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RespondResult(BaseModel):
    response: ResponseRecordOut
    card: ProposalCardOut
    counter_card: Optional[ProposalCardOut] = None
    agreement_card: Optional[ProposalCardOut] = None
    request_status: str


class FinalizeResult(BaseModel):
    agreement_card: ProposalCardOut
    request_status: str
    provider_id: Optional[str] = None
    already_finalized: bool = False


class ThreadCard(ProposalCardOut):
    responses: List[ResponseRecordOut] = []


class NegotiationThreadOut(BaseModel):
    request_id: str
    request_status: str
    is_agreement_locked: bool
    cards: List[ThreadCard]
    current_card: Optional[ThreadCard] = None
