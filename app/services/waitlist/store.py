"""Supabase-backed access to waitlist offers, entries and lifecycle events."""
from datetime import datetime
from typing import List, Optional

from app.core.exceptions import StoreError
from app.models import (
    CooldownReason,
    OfferStatus,
    ResponseChannel,
    WaitlistEntry,
    WaitlistLifecycleEvent,
    WaitlistOffer,
    WaitlistStatus,
    to_iso,
)
from app.utils.supabase_helpers import (
    conditional_supabase_update,
    safe_execute,
    safe_supabase_insert,
    safe_supabase_update,
)

OFFERS = WaitlistOffer.table_name
ENTRIES = WaitlistEntry.table_name
EVENTS = WaitlistLifecycleEvent.table_name


class WaitlistStore:
    """
    Reads and status-guarded writes over the waitlist tables.

    Every status change goes through a conditional update on the expected
    current status; a ``False`` return means another writer got there first.
    """

    def __init__(self, supabase):
        if supabase is None:
            raise StoreError("supabase", "connect")
        self.supabase = supabase

    # Offers

    def fetch_expired_offers(self, now: datetime, max_rows: int) -> List[WaitlistOffer]:
        """Pending offers whose token has expired, oldest expiry first."""
        query = (
            self.supabase.table(OFFERS)
            .select(WaitlistOffer.select_clause())
            .eq("status", OfferStatus.PENDING.value)
            .lte("token_expires_at", to_iso(now))
            .order("token_expires_at", desc=False)
            .limit(max_rows)
        )
        return [WaitlistOffer.from_dict(row) for row in safe_execute(query, OFFERS, "select expired offers")]

    def fetch_offers_due_for_reminder(
        self, now: datetime, window_end: datetime, max_rows: int
    ) -> List[WaitlistOffer]:
        """Pending, not-yet-reminded offers expiring in ``(now, window_end]``."""
        query = (
            self.supabase.table(OFFERS)
            .select(WaitlistOffer.select_clause())
            .eq("status", OfferStatus.PENDING.value)
            .is_("reminder_sent_at", "null")
            .gt("token_expires_at", to_iso(now))
            .lte("token_expires_at", to_iso(window_end))
            .order("token_expires_at", desc=False)
            .limit(max_rows)
        )
        return [WaitlistOffer.from_dict(row) for row in safe_execute(query, OFFERS, "select reminder offers")]

    def expire_offer(self, offer_id, responded_at: datetime) -> bool:
        """pending -> expired, answered by the system."""
        return conditional_supabase_update(
            self.supabase,
            OFFERS,
            {
                "status": OfferStatus.EXPIRED.value,
                "responded_at": to_iso(responded_at),
                "response_channel": ResponseChannel.SYSTEM.value,
                "updated_at": to_iso(responded_at),
            },
            offer_id,
            OfferStatus.PENDING.value,
        )

    def mark_reminder_sent(
        self,
        offer_id,
        sent_at: datetime,
        token_hash: Optional[str] = None,
        last_error: Optional[str] = None,
    ) -> bool:
        """Claim the reminder slot for an offer; only one run can win it."""
        values = {
            "reminder_sent_at": to_iso(sent_at),
            "updated_at": to_iso(sent_at),
        }
        if token_hash is not None:
            values["token_hash"] = token_hash
        if last_error is not None:
            values["last_error"] = last_error
        return conditional_supabase_update(
            self.supabase,
            OFFERS,
            values,
            offer_id,
            OfferStatus.PENDING.value,
            null_fields=("reminder_sent_at",),
        )

    def record_offer_error(self, offer_id, message: str, at: datetime) -> None:
        safe_supabase_update(
            self.supabase,
            OFFERS,
            {"last_error": message, "updated_at": to_iso(at)},
            "id",
            offer_id,
        )

    # Entries

    def get_entry(self, entry_id) -> Optional[WaitlistEntry]:
        query = (
            self.supabase.table(ENTRIES)
            .select(WaitlistEntry.select_clause())
            .eq("id", entry_id)
            .limit(1)
        )
        rows = safe_execute(query, ENTRIES, "select entry")
        return WaitlistEntry.from_dict(rows[0]) if rows else None

    def apply_cooldown(self, entry_id, decline_count: int, cooldown_until: datetime) -> None:
        """
        Put an entry into timeout cooldown.

        Not guarded on the entry's status: callers only get here after
        winning the guarded offer expiry, which is what prevents double
        processing of one timeout.
        """
        safe_supabase_update(
            self.supabase,
            ENTRIES,
            {
                "status": WaitlistStatus.COOLDOWN.value,
                "decline_count": decline_count,
                "cooldown_reason": CooldownReason.TIMEOUT.value,
                "cooldown_until": to_iso(cooldown_until),
            },
            "id",
            entry_id,
        )

    def fetch_reactivatable_entries(self, now: datetime, max_rows: int) -> List[WaitlistEntry]:
        """Cooldown entries whose penalty has elapsed, earliest first."""
        query = (
            self.supabase.table(ENTRIES)
            .select("id, salon_id, status, cooldown_until")
            .eq("status", WaitlistStatus.COOLDOWN.value)
            .lte("cooldown_until", to_iso(now))
            .order("cooldown_until", desc=False)
            .limit(max_rows)
        )
        return [WaitlistEntry.from_dict(row) for row in safe_execute(query, ENTRIES, "select cooldown entries")]

    def reactivate_entry(self, entry_id) -> bool:
        """cooldown -> waiting, clearing the penalty fields."""
        return conditional_supabase_update(
            self.supabase,
            ENTRIES,
            {
                "status": WaitlistStatus.WAITING.value,
                "cooldown_until": None,
                "cooldown_reason": None,
            },
            entry_id,
            WaitlistStatus.COOLDOWN.value,
        )

    # Lifecycle events

    def insert_lifecycle_event(self, event: WaitlistLifecycleEvent) -> None:
        safe_supabase_insert(self.supabase, EVENTS, event.to_insert_dict())

    # Policy

    def resolve_policy_row(self, salon_id, service_id) -> Optional[dict]:
        """First row of the ``resolve_waitlist_policy`` RPC, or None."""
        try:
            response = self.supabase.rpc(
                "resolve_waitlist_policy",
                {"p_salon_id": salon_id, "p_service_id": service_id},
            ).execute()
        except Exception as e:
            raise StoreError("resolve_waitlist_policy", "rpc", e) from e

        data = response.data if response is not None else None
        if not data:
            return None
        if isinstance(data, list):
            return data[0]
        return data
