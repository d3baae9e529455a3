# negotiation_service/api/error_handlers.py
"""
Translate negotiation engine errors into HTTP responses.

Body shape: {"detail": <message>, "error_code": <code>, "details": {...}}
"""
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from negotiation_service.core.exceptions import (
    AlreadyLockedError,
    DuplicateResponseError,
    InvalidCardTransitionError,
    InvalidStatusTransitionError,
    LockedRequestError,
    MissingCounterTermsError,
    MutualAcceptanceRequiredError,
    NegotiationError,
    NotParticipantError,
    ProposalCardNotFoundError,
    RequestClosedError,
    ServiceProviderNotFoundError,
    ServiceRequestNotFoundError,
    StaleProposalError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    ServiceRequestNotFoundError: status.HTTP_404_NOT_FOUND,
    ProposalCardNotFoundError: status.HTTP_404_NOT_FOUND,
    ServiceProviderNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateResponseError: status.HTTP_409_CONFLICT,
    StaleProposalError: status.HTTP_409_CONFLICT,
    LockedRequestError: status.HTTP_409_CONFLICT,
    RequestClosedError: status.HTTP_409_CONFLICT,
    InvalidStatusTransitionError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidCardTransitionError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MutualAcceptanceRequiredError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MissingCounterTermsError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotParticipantError: status.HTTP_403_FORBIDDEN,
}


def status_code_for(exc: NegotiationError) -> int:
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def negotiation_error_handler(request: Request, exc: NegotiationError) -> JSONResponse:
    """FastAPI exception handler for NegotiationError"""
    if isinstance(exc, AlreadyLockedError):
        # Finalization swallows this; reaching the API means a code path leaked it
        logger.error(f"AlreadyLockedError escaped to the API: {exc.details}")

    code = status_code_for(exc)
    if code >= status.HTTP_409_CONFLICT:
        logger.info(f"{request.method} {request.url.path} -> {code} {exc.error_code}")

    return JSONResponse(
        status_code=code,
        content={
            "detail": exc.message,
            "error_code": exc.error_code,
            "details": exc.details,
        },
    )
