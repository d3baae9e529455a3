# negotiation_service/services/negotiation/status_machine.py
"""
Lifecycle of a service request.

    pending -> negotiating -> agreed -> in_progress -> pending_review -> completed

`declined` and `cancelled` are terminal side-exits. Transitions only move
forward; `agreed` is reachable exclusively through `mark_agreed`, which the
agreement finalizer calls as its last write.
"""
import logging
from typing import Optional

from negotiation_service.core.exceptions import (
    InvalidStatusTransitionError,
    LockedRequestError,
    RequestClosedError,
)
from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.schemas.service_request import RequestStatus

logger = logging.getLogger(__name__)

# Statuses in which proposals may still be exchanged
NEGOTIABLE_STATUSES = {
    RequestStatus.PENDING.value,
    RequestStatus.NEGOTIATING.value,
}

# Valid state transitions
VALID_TRANSITIONS = {
    "pending": {"negotiating", "declined", "cancelled"},
    "negotiating": {"agreed", "declined", "cancelled"},
    "agreed": {"in_progress", "declined", "cancelled"},
    "in_progress": {"pending_review", "cancelled"},
    "pending_review": {"completed", "cancelled"},
    # Terminal states have no outgoing transitions
}

# Targets that generic callers may never request directly
RESERVED_TARGETS = {RequestStatus.AGREED.value}


def can_transition(old_status: str, new_status: str) -> bool:
    return new_status in VALID_TRANSITIONS.get(old_status, set())


def transition(request: ServiceRequest, new_status: str) -> str:
    """
    Validate and apply a status transition. Returns the previous status.
    Raises InvalidStatusTransitionError for backward, unknown or reserved moves.
    """
    new_status = RequestStatus(new_status).value
    old_status = request.status

    if new_status in RESERVED_TARGETS or not can_transition(old_status, new_status):
        logger.warning(
            f"Invalid transition for request {request.id}: {old_status} → {new_status}"
        )
        raise InvalidStatusTransitionError(request.id, old_status, new_status)

    request.status = new_status
    logger.info(f"Service request {request.id}: {old_status} → {new_status}")
    return old_status


def mark_agreed(request: ServiceRequest, provider_id: Optional[str]) -> str:
    """Lock the request into `agreed`. Only the agreement finalizer calls this."""
    old_status = request.status
    if not can_transition(old_status, RequestStatus.AGREED.value):
        raise InvalidStatusTransitionError(request.id, old_status, RequestStatus.AGREED.value)

    request.status = RequestStatus.AGREED.value
    request.is_agreement_locked = True
    if provider_id:
        request.provider_id = provider_id
    logger.info(f"Service request {request.id}: {old_status} → agreed (locked)")
    return old_status


def ensure_negotiable(request: ServiceRequest) -> None:
    """Raise unless proposals may still be submitted or answered on `request`."""
    if request.is_agreement_locked:
        raise LockedRequestError(request.id)
    if request.status not in NEGOTIABLE_STATUSES:
        raise RequestClosedError(request.id, request.status)
