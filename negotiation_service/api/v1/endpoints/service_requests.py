# negotiation_service/api/v1/endpoints/service_requests.py
"""Service request endpoints: lifecycle, proposals, thread and comments."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from negotiation_service.api import deps
from negotiation_service.core.limiter import limiter
from negotiation_service.db.session import get_db
from negotiation_service.schemas.comment import CommentCreate, CommentOut
from negotiation_service.schemas.proposal_card import (
    NegotiationThreadOut,
    ProposalCardOut,
    ProposalSubmission,
)
from negotiation_service.schemas.service_request import (
    CancelRequestBody,
    DeclineAssignmentBody,
    DeliverablesSubmission,
    RequestStatus,
    ServiceRequestCreate,
    ServiceRequestListResult,
    ServiceRequestResponse,
)
from negotiation_service.schemas.token import TokenPayload
from negotiation_service.services.negotiation import negotiation_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/service-requests", tags=["Service Requests"])


@router.post(
    "",
    response_model=ServiceRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
def create_service_request(
    request: Request,
    body: ServiceRequestCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Create a service request owned by the caller (the organizer)."""
    return negotiation_engine.create_request(db, organizer_id=current_user.sub, data=body)


@router.get("", response_model=ServiceRequestListResult)
def list_service_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Requests where the caller is the organizer or the assigned provider."""
    return negotiation_engine.list_requests_for_actor(
        db,
        current_user.sub,
        status=status_filter.value if status_filter else None,
        page=page,
        page_size=page_size,
    )


@router.get("/{request_id}", response_model=ServiceRequestResponse)
def get_service_request(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.get_request(db, request_id)


@router.get("/{request_id}/thread", response_model=NegotiationThreadOut)
def get_negotiation_thread(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """All proposal cards of the request, oldest first, with their responses."""
    return negotiation_engine.get_thread(db, request_id)


@router.post(
    "/{request_id}/proposals",
    response_model=ProposalCardOut,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
def submit_proposal(
    request: Request,
    request_id: str,
    body: ProposalSubmission,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Submit a proposal. Set `responds_to` to counter the current pending card;
    a stale `responds_to` is rejected with 409.
    """
    return negotiation_engine.submit_proposal(
        db,
        request_id=request_id,
        actor_id=current_user.sub,
        terms=body.terms,
        responds_to=body.responds_to,
    )


# ── Lifecycle ─────────────────────────────────────────────────────────

@router.post("/{request_id}/cancel", response_model=ServiceRequestResponse)
@limiter.limit("10/minute")
def cancel_service_request(
    request: Request,
    request_id: str,
    body: Optional[CancelRequestBody] = None,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.cancel_request(
        db,
        request_id=request_id,
        actor_id=current_user.sub,
        reason=body.reason if body else None,
    )


@router.post("/{request_id}/decline", response_model=ServiceRequestResponse)
@limiter.limit("10/minute")
def decline_assignment(
    request: Request,
    request_id: str,
    body: Optional[DeclineAssignmentBody] = None,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.decline_assignment(
        db,
        request_id=request_id,
        actor_id=current_user.sub,
        reason=body.reason if body else None,
    )


@router.post("/{request_id}/start", response_model=ServiceRequestResponse)
@limiter.limit("10/minute")
def start_work(
    request: Request,
    request_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.start_work(db, request_id=request_id, actor_id=current_user.sub)


@router.post("/{request_id}/deliverables", response_model=ServiceRequestResponse)
@limiter.limit("10/minute")
def submit_deliverables(
    request: Request,
    request_id: str,
    body: DeliverablesSubmission,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.submit_deliverables(
        db,
        request_id=request_id,
        actor_id=current_user.sub,
        deliverables=body.deliverables,
        notes=body.notes,
    )


@router.post("/{request_id}/confirm-completion", response_model=ServiceRequestResponse)
@limiter.limit("10/minute")
def confirm_completion(
    request: Request,
    request_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.confirm_completion(
        db, request_id=request_id, actor_id=current_user.sub
    )


# ── Comments ──────────────────────────────────────────────────────────

@router.get("/{request_id}/comments", response_model=List[CommentOut])
def list_comments(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.list_comments(db, request_id)


@router.post(
    "/{request_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("60/minute")
def add_comment(
    request: Request,
    request_id: str,
    body: CommentCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return negotiation_engine.add_comment(
        db, request_id=request_id, actor_id=current_user.sub, data=body
    )
