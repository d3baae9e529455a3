# negotiation_service/crud/crud_project_completion.py
from datetime import datetime, timezone
from typing import Optional, List

from sqlalchemy.orm import Session

from negotiation_service.models.project_completion import ProjectCompletion


def get_for_request(db: Session, request_id: str) -> Optional[ProjectCompletion]:
    return (
        db.query(ProjectCompletion)
        .filter(ProjectCompletion.request_id == request_id)
        .first()
    )


def create(
    db: Session,
    *,
    request_id: str,
    submitted_by: str,
    deliverables: List[str],
    notes: Optional[str] = None,
) -> ProjectCompletion:
    completion = ProjectCompletion(
        request_id=request_id,
        submitted_by=submitted_by,
        deliverables=list(deliverables),
        notes=notes,
        status="submitted",
    )
    db.add(completion)
    db.flush()
    return completion


def confirm(db: Session, *, completion: ProjectCompletion, confirmed_by: str) -> ProjectCompletion:
    completion.status = "confirmed"
    completion.confirmed_by = confirmed_by
    completion.confirmed_at = datetime.now(timezone.utc)
    db.flush()
    return completion
