# negotiation_service/services/negotiation/__init__.py
from negotiation_service.services.negotiation.service import NegotiationService, negotiation_engine

__all__ = ["NegotiationService", "negotiation_engine"]
