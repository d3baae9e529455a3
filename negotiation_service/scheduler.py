# negotiation_service/scheduler.py
"""
APScheduler wiring for the negotiation event outbox.

Negotiation operations publish their events right after commit; the only
periodic job here re-publishes whatever was left behind
(see background_tasks/outbox_tasks.py).
"""

import logging
from datetime import datetime, timezone

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MISSED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from negotiation_service.background_tasks.outbox_tasks import relay_pending_events
from negotiation_service.core.config import settings

logger = logging.getLogger(__name__)

RELAY_JOB_ID = "relay_pending_events"

scheduler = None

# Outcome of the most recent relay run, reported by the health endpoint
relay_state = {"last_run_at": None, "last_published": None, "consecutive_failures": 0}


def _on_relay_executed(event):
    relay_state["last_run_at"] = datetime.now(timezone.utc).isoformat()
    relay_state["last_published"] = event.retval
    relay_state["consecutive_failures"] = 0
    if event.retval:
        logger.info(f"Outbox relay run published {event.retval} event(s)")


def _on_relay_error(event):
    relay_state["consecutive_failures"] += 1
    logger.error(
        f"Outbox relay run failed ({relay_state['consecutive_failures']} in a row): {event.exception}"
    )
    if event.traceback:
        logger.error(f"Outbox relay traceback:\n{event.traceback}")


def _on_relay_missed(event):
    logger.warning(f"Outbox relay run missed its window (scheduled {event.scheduled_run_time})")


def init_scheduler():
    """Start the background scheduler with the outbox relay job. Called once at startup."""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already initialized")
        return scheduler

    scheduler = BackgroundScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,  # a backlog of missed runs collapses into one
            "max_instances": 1,
            "misfire_grace_time": settings.OUTBOX_RELAY_INTERVAL_SECONDS,
        },
    )
    scheduler.add_job(
        func=relay_pending_events,
        trigger=IntervalTrigger(seconds=settings.OUTBOX_RELAY_INTERVAL_SECONDS),
        id=RELAY_JOB_ID,
        name="Relay unpublished negotiation events",
        replace_existing=True,
    )
    scheduler.add_listener(_on_relay_executed, EVENT_JOB_EXECUTED)
    scheduler.add_listener(_on_relay_error, EVENT_JOB_ERROR)
    scheduler.add_listener(_on_relay_missed, EVENT_JOB_MISSED)

    scheduler.start()
    logger.info(
        f"Background scheduler started; outbox relay every "
        f"{settings.OUTBOX_RELAY_INTERVAL_SECONDS}s"
    )
    return scheduler


def shutdown_scheduler():
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=True)
        logger.info("Background scheduler shutdown complete")
        scheduler = None


def get_scheduler_status():
    """Scheduler state plus the relay job's next run and last outcome."""
    if scheduler is None:
        return {"status": "not_initialized", "relay": dict(relay_state)}

    job = scheduler.get_job(RELAY_JOB_ID)
    next_run = job.next_run_time.isoformat() if job and job.next_run_time else None
    return {
        "status": "running" if scheduler.running else "stopped",
        "relay": {**relay_state, "next_run_at": next_run},
    }
