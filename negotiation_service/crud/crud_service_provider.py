# negotiation_service/crud/crud_service_provider.py
from typing import Optional

from sqlalchemy.orm import Session

from negotiation_service.models.service_provider import ServiceProvider


def get(db: Session, provider_id: str) -> Optional[ServiceProvider]:
    return db.query(ServiceProvider).filter(ServiceProvider.id == provider_id).first()


def get_by_user_id(db: Session, user_id: str) -> Optional[ServiceProvider]:
    """Provider directory lookup: actor id -> provider entity."""
    return db.query(ServiceProvider).filter(ServiceProvider.user_id == user_id).first()


def create(db: Session, *, user_id: str, business_name: str) -> ServiceProvider:
    provider = ServiceProvider(user_id=user_id, business_name=business_name)
    db.add(provider)
    db.flush()
    return provider
