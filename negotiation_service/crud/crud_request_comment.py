# negotiation_service/crud/crud_request_comment.py
from typing import List

from sqlalchemy.orm import Session

from negotiation_service.models.request_comment import RequestComment


def create(
    db: Session,
    *,
    request_id: str,
    author_id: str,
    content: str,
    comment_type: str = "general",
) -> RequestComment:
    comment = RequestComment(
        request_id=request_id,
        author_id=author_id,
        comment_type=comment_type,
        content=content,
    )
    db.add(comment)
    db.flush()
    return comment


def list_for_request(db: Session, request_id: str, limit: int = 200) -> List[RequestComment]:
    return (
        db.query(RequestComment)
        .filter(RequestComment.request_id == request_id)
        .order_by(RequestComment.created_at.asc(), RequestComment.id)
        .limit(limit)
        .all()
    )
