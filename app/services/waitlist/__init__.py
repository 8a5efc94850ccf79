"""
Waitlist offer lifecycle and cooldown reconciliation.

Entry points called by the periodic tasks (or by hand):
- process_expired_waitlist_offers: expire timed-out offers, apply cooldowns, chain freed slots
- reactivate_cooldown_entries: return entries whose cooldown has elapsed to the waitlist
- process_due_waitlist_reminders: remind customers whose offer is about to lapse

None of them raise for per-row or store problems; they return counters.
"""
import logging

from app.config.database import get_supabase_service_client
from app.config.settings import settings
from app.schemas.waitlist import ExpiredOfferRunResult, ReactivationRunResult, ReminderRunResult
from app.services.waitlist.notifier import NextCandidateNotifier, load_notifier
from app.services.waitlist.policy import PolicyResolver
from app.services.waitlist.reactivator import CooldownReactivator
from app.services.waitlist.reconciler import OfferExpiryReconciler
from app.services.waitlist.reminders import OfferReminderDispatcher, ReminderSender, load_reminder_sender
from app.services.waitlist.store import WaitlistStore
from app.services.waitlist.transitions import LifecycleLog, utcnow

logger = logging.getLogger(__name__)


def _open_store(client=None) -> WaitlistStore:
    return WaitlistStore(client if client is not None else get_supabase_service_client())


def process_expired_waitlist_offers(
    max_rows: int = 200,
    *,
    client=None,
    notifier: NextCandidateNotifier = None,
    clock=utcnow,
) -> ExpiredOfferRunResult:
    try:
        store = _open_store(client)
        if notifier is None:
            notifier = load_notifier(settings.WAITLIST_NEXT_CANDIDATE_NOTIFIER)
    except Exception as e:
        logger.warning(f"Expired waitlist offer job could not start: {e}")
        return ExpiredOfferRunResult(errors=1)

    reconciler = OfferExpiryReconciler(
        store,
        PolicyResolver(store, fallback_on_error=settings.WAITLIST_POLICY_ERROR_FALLBACK),
        notifier,
        LifecycleLog(store),
        clock=clock,
    )
    return reconciler.process_expired_offers(max_rows)


def reactivate_cooldown_entries(max_rows: int = 500, *, client=None, clock=utcnow) -> ReactivationRunResult:
    try:
        store = _open_store(client)
    except Exception as e:
        logger.warning(f"Cooldown reactivation job could not start: {e}")
        return ReactivationRunResult(errors=1)

    return CooldownReactivator(store, LifecycleLog(store), clock=clock).reactivate(max_rows)


def process_due_waitlist_reminders(
    max_rows: int = 200,
    *,
    client=None,
    sender: ReminderSender = None,
    clock=utcnow,
) -> ReminderRunResult:
    try:
        if sender is None:
            sender = load_reminder_sender(settings.WAITLIST_REMINDER_SENDER)
        if sender is None:
            logger.debug("No waitlist reminder sender configured; skipping reminders")
            return ReminderRunResult()
        store = _open_store(client)
    except Exception as e:
        logger.warning(f"Waitlist reminder job could not start: {e}")
        return ReminderRunResult(errors=1)

    dispatcher = OfferReminderDispatcher(
        store,
        sender,
        LifecycleLog(store),
        clock=clock,
        lead_minutes=settings.WAITLIST_REMINDER_LEAD_MINUTES,
    )
    return dispatcher.process_due_reminders(max_rows)


__all__ = [
    "process_expired_waitlist_offers",
    "reactivate_cooldown_entries",
    "process_due_waitlist_reminders",
    "OfferExpiryReconciler",
    "CooldownReactivator",
    "OfferReminderDispatcher",
    "PolicyResolver",
    "WaitlistStore",
    "LifecycleLog",
    "NextCandidateNotifier",
    "ReminderSender",
]
