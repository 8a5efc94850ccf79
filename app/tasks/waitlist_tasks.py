"""Periodic waitlist jobs run by Celery beat."""
import logging

from app.config.settings import settings
from app.services.waitlist import (
    process_due_waitlist_reminders,
    process_expired_waitlist_offers,
    reactivate_cooldown_entries,
)
from app.tasks.app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.waitlist_tasks.expire_waitlist_offers")
def expire_waitlist_offers(max_rows: int = None) -> dict:
    """
    Expire timed-out offers, put their entries into cooldown and chain the freed slots.
    Safe to run concurrently with itself and with the other waitlist tasks.
    """
    result = process_expired_waitlist_offers(max_rows or settings.WAITLIST_EXPIRED_OFFER_BATCH_SIZE)
    if result.errors:
        logger.warning(f"Expired waitlist offer run finished with {result.errors} error(s)")
    return result.model_dump()


@celery_app.task(name="app.tasks.waitlist_tasks.reactivate_waitlist_cooldowns")
def reactivate_waitlist_cooldowns(max_rows: int = None) -> dict:
    """Return entries whose cooldown has elapsed to the waitlist."""
    result = reactivate_cooldown_entries(max_rows or settings.WAITLIST_COOLDOWN_BATCH_SIZE)
    if result.errors:
        logger.warning(f"Cooldown reactivation run finished with {result.errors} error(s)")
    return result.model_dump()


@celery_app.task(name="app.tasks.waitlist_tasks.send_waitlist_offer_reminders")
def send_waitlist_offer_reminders(max_rows: int = None) -> dict:
    result = process_due_waitlist_reminders(max_rows or settings.WAITLIST_REMINDER_BATCH_SIZE)
    if result.errors:
        logger.warning(f"Waitlist reminder run finished with {result.errors} error(s)")
    return result.model_dump()
