# negotiation_service/api/v1/api.py

from fastapi import APIRouter
from negotiation_service.api.v1.endpoints import (
    health,
    proposal_cards,
    providers,
    service_requests,
)

# This is the main router for the v1 API.
# It will include all the specific endpoint routers.
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(service_requests.router)
api_router.include_router(proposal_cards.router)
api_router.include_router(providers.router)
