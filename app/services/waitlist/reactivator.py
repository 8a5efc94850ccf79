"""Returns waitlist entries to ``waiting`` once their cooldown has elapsed."""
from datetime import datetime
from typing import Callable
import logging

from app.models import LifecycleReason, WaitlistStatus
from app.schemas.waitlist import ReactivationRunResult
from app.services.waitlist.store import WaitlistStore
from app.services.waitlist.transitions import LifecycleLog, guarded_transition, utcnow

logger = logging.getLogger(__name__)

PROCESSOR_NAME = "reactivate_cooldown_entries"


class CooldownReactivator:
    """Reactivation only makes entries eligible again; no customer is contacted here."""

    def __init__(
        self,
        store: WaitlistStore,
        lifecycle_log: LifecycleLog,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.lifecycle_log = lifecycle_log
        self.clock = clock

    def reactivate(self, max_rows: int = 500) -> ReactivationRunResult:
        result = ReactivationRunResult()

        try:
            entries = self.store.fetch_reactivatable_entries(self.clock(), max_rows)
        except Exception as e:
            logger.warning(f"Failed to load cooldown waitlist entries: {e}")
            result.errors = 1
            return result

        if not entries:
            return result

        for entry in entries:
            try:
                reactivated = guarded_transition(
                    lambda: self.store.reactivate_entry(entry.id),
                    self.lifecycle_log,
                    entry_id=entry.id,
                    salon_id=entry.salon_id,
                    from_status=WaitlistStatus.COOLDOWN.value,
                    to_status=WaitlistStatus.WAITING.value,
                    reason=LifecycleReason.COOLDOWN_REACTIVATED.value,
                    metadata={"processor": PROCESSOR_NAME},
                )
            except Exception as e:
                result.errors += 1
                logger.warning(
                    f"Failed reactivating waitlist entry {entry.id}: {e}",
                    extra={"entry_id": entry.id, "salon_id": entry.salon_id},
                )
                continue

            if reactivated:
                result.reactivated += 1

        logger.info(
            f"Reactivated waitlist cooldown entries: reactivated={result.reactivated} errors={result.errors}",
            extra=result.model_dump(),
        )
        return result
