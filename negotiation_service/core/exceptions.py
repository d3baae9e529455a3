# negotiation_service/core/exceptions.py
"""
Custom exception hierarchy for the negotiation service.
All exceptions inherit from NegotiationError for consistent handling.

Contention errors (duplicate response, stale proposal) and precondition
errors (locked or closed request) are returned to the caller as-is and are
never retried by the engine.
"""

from typing import Optional


class NegotiationError(Exception):
    """Base exception for all negotiation engine errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "NEGOTIATION_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ===========================================
# Lookup Exceptions
# ===========================================


class ServiceRequestNotFoundError(NegotiationError):
    def __init__(self, request_id: str):
        super().__init__(
            message=f"Service request {request_id} not found",
            error_code="SERVICE_REQUEST_NOT_FOUND",
            details={"request_id": request_id},
        )


class ProposalCardNotFoundError(NegotiationError):
    def __init__(self, card_id: str):
        super().__init__(
            message=f"Proposal card {card_id} not found",
            error_code="PROPOSAL_CARD_NOT_FOUND",
            details={"card_id": card_id},
        )


class ServiceProviderNotFoundError(NegotiationError):
    def __init__(self, provider_id: str):
        super().__init__(
            message=f"Service provider {provider_id} not found",
            error_code="SERVICE_PROVIDER_NOT_FOUND",
            details={"provider_id": provider_id},
        )


# ===========================================
# Contention Exceptions
# ===========================================


class DuplicateResponseError(NegotiationError):
    """The actor already responded to this card."""

    def __init__(self, card_id: str, actor_id: str):
        super().__init__(
            message="You have already responded to this proposal",
            error_code="DUPLICATE_RESPONSE",
            details={"card_id": card_id, "actor_id": actor_id},
        )


class StaleProposalError(NegotiationError):
    """The targeted card is no longer the current pending card."""

    def __init__(self, request_id: str, card_id: Optional[str], current_card_id: Optional[str]):
        super().__init__(
            message="Someone already acted on this proposal; refresh the thread",
            error_code="STALE_PROPOSAL",
            details={
                "request_id": request_id,
                "card_id": card_id,
                "current_card_id": current_card_id,
            },
        )


# ===========================================
# Precondition Exceptions
# ===========================================


class LockedRequestError(NegotiationError):
    def __init__(self, request_id: str):
        super().__init__(
            message="This engagement is already finalized",
            error_code="REQUEST_LOCKED",
            details={"request_id": request_id},
        )


class RequestClosedError(NegotiationError):
    """The request reached a terminal status (declined, cancelled, completed)."""

    def __init__(self, request_id: str, status: str):
        super().__init__(
            message=f"This engagement is {status} and can no longer be negotiated",
            error_code="REQUEST_CLOSED",
            details={"request_id": request_id, "status": status},
        )


class InvalidStatusTransitionError(NegotiationError):
    def __init__(self, request_id: str, old_status: str, new_status: str):
        super().__init__(
            message=f"Cannot move service request from '{old_status}' to '{new_status}'",
            error_code="INVALID_STATUS_TRANSITION",
            details={
                "request_id": request_id,
                "old_status": old_status,
                "new_status": new_status,
            },
        )


class InvalidCardTransitionError(NegotiationError):
    def __init__(self, card_id: str, old_status: str, new_status: str):
        super().__init__(
            message=f"Cannot move proposal card from '{old_status}' to '{new_status}'",
            error_code="INVALID_CARD_TRANSITION",
            details={
                "card_id": card_id,
                "old_status": old_status,
                "new_status": new_status,
            },
        )


class MutualAcceptanceRequiredError(NegotiationError):
    def __init__(self, card_id: str):
        super().__init__(
            message="Both parties must accept the proposal before it can be finalized",
            error_code="MUTUAL_ACCEPTANCE_REQUIRED",
            details={"card_id": card_id},
        )


class MissingCounterTermsError(NegotiationError):
    def __init__(self, card_id: str):
        super().__init__(
            message="A counter proposal must carry the new terms",
            error_code="MISSING_COUNTER_TERMS",
            details={"card_id": card_id},
        )


class NotParticipantError(NegotiationError):
    def __init__(self, request_id: str, actor_id: str, action: str = "negotiate"):
        super().__init__(
            message=f"You are not allowed to {action} on this engagement",
            error_code="NOT_PARTICIPANT",
            details={"request_id": request_id, "actor_id": actor_id},
        )


# ===========================================
# Idempotent No-ops
# ===========================================


class AlreadyLockedError(NegotiationError):
    """
    Raised inside the finalizer when the request is already locked.
    Never surfaced to API callers: finalization is idempotent.
    """

    def __init__(self, request_id: str):
        super().__init__(
            message=f"Service request {request_id} is already finalized",
            error_code="ALREADY_LOCKED",
            details={"request_id": request_id},
        )
