# negotiation_service/api/v1/endpoints/providers.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from negotiation_service.api import deps
from negotiation_service.core.limiter import limiter
from negotiation_service.db.session import get_db
from negotiation_service.schemas.provider import ServiceProviderCreate, ServiceProviderOut
from negotiation_service.schemas.token import TokenPayload
from negotiation_service.services.negotiation import negotiation_engine

router = APIRouter(prefix="/providers", tags=["Providers"])


@router.post("", response_model=ServiceProviderOut, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def register_provider(
    request: Request,
    body: ServiceProviderCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Register the caller as a service provider (idempotent)."""
    return negotiation_engine.register_provider(db, actor_id=current_user.sub, data=body)
