# negotiation_service/graphql/negotiation_types.py
"""Strawberry GraphQL types for service-engagement negotiation."""
import strawberry
from typing import Optional, List
from datetime import datetime
from enum import Enum
from strawberry.scalars import JSON


# --- Enums ---

@strawberry.enum
class RequestStatusEnum(Enum):
    PENDING = "pending"
    NEGOTIATING = "negotiating"
    AGREED = "agreed"
    IN_PROGRESS = "in_progress"
    PENDING_REVIEW = "pending_review"
    COMPLETED = "completed"
    DECLINED = "declined"
    CANCELLED = "cancelled"


@strawberry.enum
class CardStatusEnum(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COUNTERED = "countered"
    CANCELLED = "cancelled"
    AGREEMENT = "agreement"


@strawberry.enum
class ResponseTypeEnum(Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    COUNTER = "counter"
    CANCEL = "cancel"


# --- Output Types ---

@strawberry.type
class ServiceRequestType:
    id: str
    organizerId: str
    providerId: Optional[str]
    title: str
    description: Optional[str]
    budgetRange: Optional[JSON]
    timeline: Optional[str]
    status: RequestStatusEnum
    isAgreementLocked: bool
    createdAt: Optional[datetime]
    updatedAt: Optional[datetime]


@strawberry.type
class ResponseRecordType:
    id: str
    cardId: str
    respondedBy: str
    responseType: ResponseTypeEnum
    responseNotes: Optional[str]
    createdAt: Optional[datetime]


@strawberry.type
class ProposalCardType:
    id: str
    requestId: str
    submittedBy: str
    cardNumber: int
    status: CardStatusEnum
    negotiatedTitle: Optional[str]
    negotiatedDescription: Optional[str]
    negotiatedBudgetRange: Optional[JSON]
    negotiatedTimeline: Optional[str]
    responseToCardId: Optional[str]
    createdAt: Optional[datetime]
    responses: List[ResponseRecordType]


@strawberry.type
class NegotiationThreadType:
    requestId: str
    requestStatus: RequestStatusEnum
    isAgreementLocked: bool
    cards: List[ProposalCardType]
    currentCard: Optional[ProposalCardType]


@strawberry.type
class RespondResultType:
    response: ResponseRecordType
    card: ProposalCardType
    counterCard: Optional[ProposalCardType]
    agreementCard: Optional[ProposalCardType]
    requestStatus: RequestStatusEnum


# --- Input Types ---

@strawberry.input
class BudgetRangeInput:
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"


@strawberry.input
class ProposalTermsInput:
    title: Optional[str] = None
    description: Optional[str] = None
    budgetRange: Optional[BudgetRangeInput] = None
    timeline: Optional[str] = None
