"""Lifecycle log and the guarded-transition discipline shared by the waitlist jobs."""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
import logging

from app.models import WaitlistLifecycleEvent

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LifecycleLog:
    """
    Best-effort audit trail of waitlist transitions.

    The state change is the source of truth; a failed insert is logged and
    never undoes it.
    """

    def __init__(self, store):
        self.store = store

    def record(
        self,
        entry_id,
        salon_id,
        from_status: str,
        to_status: str,
        reason: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        event = WaitlistLifecycleEvent(
            waitlist_entry_id=entry_id,
            salon_id=salon_id,
            from_status=from_status,
            to_status=to_status,
            reason=reason,
            metadata=metadata or {},
        )
        try:
            self.store.insert_lifecycle_event(event)
            return True
        except Exception as e:
            logger.warning(
                f"Failed to record waitlist lifecycle event {from_status} -> {to_status} for entry {entry_id}: {e}",
                extra={"entry_id": entry_id, "salon_id": salon_id},
            )
            return False


def guarded_transition(
    update: Callable[[], bool],
    lifecycle_log: LifecycleLog,
    *,
    entry_id,
    salon_id,
    from_status: str,
    to_status: str,
    reason: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> bool:
    """
    Run a status-guarded update and, if it won, log exactly one event.

    ``update`` must be a compare-and-swap on the expected current status and
    return whether a row changed. Losing the race is not an error: the row
    was already handled elsewhere, so nothing is logged and False is returned.
    """
    if not update():
        logger.debug(f"Skipping entry {entry_id}: {from_status} -> {to_status} already applied elsewhere")
        return False
    lifecycle_log.record(entry_id, salon_id, from_status, to_status, reason, metadata)
    return True
