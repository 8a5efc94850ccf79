"""Append-only audit record of one waitlist status transition."""
from enum import Enum
from typing import Any, Dict
from app.models.base import SupabaseModel


class LifecycleReason(str, Enum):
    """Reason tags written by the background jobs."""
    OFFER_TIMEOUT = "offer_timeout"
    COOLDOWN_REACTIVATED = "cooldown_reactivated"
    OFFER_REMINDER_SENT = "offer_reminder_sent"


class WaitlistLifecycleEvent(SupabaseModel):
    """
    One row per transition. Never updated or deleted; ``created_at`` is
    filled in by the database default.
    """
    table_name = "waitlist_lifecycle_events"
    timestamp_fields = ("created_at",)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.waitlist_entry_id = kwargs.get('waitlist_entry_id')
        self.salon_id = kwargs.get('salon_id')
        self.from_status = kwargs.get('from_status')
        self.to_status = kwargs.get('to_status')
        self.reason = kwargs.get('reason')
        self.metadata: Dict[str, Any] = kwargs.get('metadata') or {}

    def to_insert_dict(self) -> Dict[str, Any]:
        """Payload for insert; omits ``created_at`` so the store default applies."""
        data = self.to_supabase_dict()
        data.pop('created_at', None)
        data.pop('id', None)
        return data
