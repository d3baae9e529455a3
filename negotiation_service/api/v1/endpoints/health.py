# negotiation_service/api/v1/endpoints/health.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from negotiation_service.db.session import get_db
from negotiation_service.scheduler import get_scheduler_status

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    database = "ok"
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check database probe failed: {e}")
        database = "unavailable"

    scheduler_status = get_scheduler_status()
    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "scheduler": scheduler_status["status"],
        "outbox_relay": scheduler_status["relay"],
    }
