# negotiation_service/crud/crud_proposal_card.py
from typing import Optional, List

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from negotiation_service.models.proposal_card import ProposalCard


def get(db: Session, card_id: str) -> Optional[ProposalCard]:
    return db.query(ProposalCard).filter(ProposalCard.id == card_id).first()


def insert(
    db: Session,
    *,
    request_id: str,
    submitted_by: str,
    card_number: int,
    status: str,
    negotiated_title: Optional[str] = None,
    negotiated_description: Optional[str] = None,
    negotiated_budget_range: Optional[dict] = None,
    negotiated_timeline: Optional[str] = None,
    response_to_card_id: Optional[str] = None,
) -> ProposalCard:
    card = ProposalCard(
        request_id=request_id,
        submitted_by=submitted_by,
        card_number=card_number,
        status=status,
        negotiated_title=negotiated_title,
        negotiated_description=negotiated_description,
        negotiated_budget_range=negotiated_budget_range,
        negotiated_timeline=negotiated_timeline,
        response_to_card_id=response_to_card_id,
    )
    db.add(card)
    db.flush()
    return card


def list_for_request(db: Session, request_id: str) -> List[ProposalCard]:
    """All cards of a request in card_number order, responses preloaded."""
    return (
        db.query(ProposalCard)
        .options(selectinload(ProposalCard.responses))
        .filter(ProposalCard.request_id == request_id)
        .order_by(ProposalCard.card_number.asc())
        .all()
    )


def get_pending_for_request(db: Session, request_id: str) -> Optional[ProposalCard]:
    return (
        db.query(ProposalCard)
        .filter(
            ProposalCard.request_id == request_id,
            ProposalCard.status == "pending",
        )
        .order_by(ProposalCard.card_number.desc())
        .first()
    )


def count_pending(db: Session, request_id: str) -> int:
    return db.query(func.count(ProposalCard.id)).filter(
        ProposalCard.request_id == request_id,
        ProposalCard.status == "pending",
    ).scalar()


def get_agreement_for(db: Session, original_card_id: str) -> Optional[ProposalCard]:
    """The finalization card created for `original_card_id`, if any."""
    return (
        db.query(ProposalCard)
        .filter(
            ProposalCard.response_to_card_id == original_card_id,
            ProposalCard.status == "agreement",
        )
        .first()
    )


def get_agreement_for_request(db: Session, request_id: str) -> Optional[ProposalCard]:
    return (
        db.query(ProposalCard)
        .filter(
            ProposalCard.request_id == request_id,
            ProposalCard.status == "agreement",
        )
        .order_by(ProposalCard.card_number.desc())
        .first()
    )


def get_latest_for_request(db: Session, request_id: str) -> Optional[ProposalCard]:
    return (
        db.query(ProposalCard)
        .filter(ProposalCard.request_id == request_id)
        .order_by(ProposalCard.card_number.desc())
        .first()
    )
