# negotiation_service/background_tasks/outbox_tasks.py
"""
Background task for the negotiation event outbox.

Events are normally published right after the operation that raised them
commits. Anything left unpublished (broker down, process crash between
commit and publish) is retried here:
- relay_pending_events(): every OUTBOX_RELAY_INTERVAL_SECONDS
"""

import logging

from negotiation_service.core.config import settings
from negotiation_service.crud import crud_domain_event
from negotiation_service.db.session import SessionLocal
from negotiation_service.utils.kafka_helpers import publish_negotiation_event
from negotiation_service.utils.realtime import publish_realtime

logger = logging.getLogger(__name__)


def relay_pending_events(session_factory=SessionLocal) -> int:
    """
    Background task: publish outbox rows that have not reached Kafka yet.

    Process:
    1. Lock a batch of unpublished events (rows held by another relay are skipped)
    2. Publish each to Kafka and Redis
    3. Stamp published_at, or count the failed attempt
    4. Commit

    Returns the number of events published.
    """
    db = session_factory()
    published = 0

    try:
        batch = crud_domain_event.get_unpublished(
            db,
            batch_size=settings.OUTBOX_RELAY_BATCH_SIZE,
            max_attempts=settings.OUTBOX_MAX_ATTEMPTS,
        )
        if not batch:
            return 0

        for event in batch:
            if publish_negotiation_event(event):
                publish_realtime(event)
                crud_domain_event.mark_published(db, event=event)
                published += 1
            else:
                crud_domain_event.mark_failed_attempt(db, event=event)
                if event.publish_attempts >= settings.OUTBOX_MAX_ATTEMPTS:
                    logger.error(
                        f"Giving up on negotiation event {event.id} after "
                        f"{event.publish_attempts} attempts"
                    )

        db.commit()
        logger.info(f"Outbox relay published {published}/{len(batch)} negotiation events")
        return published

    except Exception as e:
        logger.error(f"Error in relay_pending_events: {e}", exc_info=True)
        db.rollback()
        return published

    finally:
        db.close()
