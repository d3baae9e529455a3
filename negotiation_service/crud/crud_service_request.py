# negotiation_service/crud/crud_service_request.py
"""
Data access for service requests.

Write helpers only flush; the negotiation service commits once per operation
so that every state change lands in a single transaction.
"""
import math
from typing import Optional

from sqlalchemy import or_, update
from sqlalchemy.orm import Session, joinedload

from negotiation_service.models.service_request import ServiceRequest
from negotiation_service.models.service_provider import ServiceProvider
from negotiation_service.schemas.service_request import ServiceRequestCreate


def create(db: Session, *, organizer_id: str, data: ServiceRequestCreate) -> ServiceRequest:
    db_obj = ServiceRequest(
        organizer_id=organizer_id,
        provider_id=data.provider_id,
        title=data.title,
        description=data.description,
        budget_range=data.budget_range.to_json() if data.budget_range else None,
        timeline=data.timeline,
        status="pending",
        is_agreement_locked=False,
        card_sequence=0,
    )
    db.add(db_obj)
    db.flush()
    return db_obj


def get(db: Session, request_id: str) -> Optional[ServiceRequest]:
    return (
        db.query(ServiceRequest)
        .options(joinedload(ServiceRequest.provider))
        .filter(ServiceRequest.id == request_id)
        .first()
    )


def get_for_update(db: Session, request_id: str) -> Optional[ServiceRequest]:
    """
    Load the request row with SELECT ... FOR UPDATE.

    The request row is the synchronization point of a negotiation: every
    state-changing operation acquires it before touching cards or responses.
    `populate_existing` makes sure an identity-mapped copy is refreshed with
    the locked row's values.
    """
    return (
        db.query(ServiceRequest)
        .filter(ServiceRequest.id == request_id)
        .populate_existing()
        .with_for_update()
        .first()
    )


def allocate_card_number(db: Session, request_id: str) -> Optional[int]:
    """
    Reserve the next card number with a single conditional write.

    Returns None when the request is locked (or missing), so the lock check
    and the sequence bump cannot be separated by a concurrent finalization.
    """
    stmt = (
        update(ServiceRequest)
        .where(
            ServiceRequest.id == request_id,
            ServiceRequest.is_agreement_locked.is_(False),
        )
        .values(card_sequence=ServiceRequest.card_sequence + 1)
        .returning(ServiceRequest.card_sequence)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).scalar_one_or_none()


def list_for_actor(
    db: Session,
    actor_id: str,
    status: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    """Requests where the actor is the organizer or the assigned provider."""
    page_size = min(page_size, 50)
    query = (
        db.query(ServiceRequest)
        .outerjoin(ServiceProvider, ServiceProvider.id == ServiceRequest.provider_id)
        .filter(
            or_(
                ServiceRequest.organizer_id == actor_id,
                ServiceProvider.user_id == actor_id,
            )
        )
    )

    if status:
        query = query.filter(ServiceRequest.status == status)

    total_count = query.count()
    total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0
    offset = (page - 1) * page_size

    items = (
        query.order_by(ServiceRequest.created_at.desc(), ServiceRequest.id)
        .offset(offset)
        .limit(page_size)
        .all()
    )

    return {
        "service_requests": items,
        "total_count": total_count,
        "total_pages": total_pages,
    }
