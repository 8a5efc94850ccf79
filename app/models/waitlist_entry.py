"""Waitlist entry model for salon waitlists using Supabase."""
from enum import Enum
from app.models.base import SupabaseModel


class WaitlistStatus(str, Enum):
    """Waitlist entry status enumeration."""
    WAITING = "waiting"
    NOTIFIED = "notified"
    COOLDOWN = "cooldown"
    BOOKED = "booked"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class CooldownReason(str, Enum):
    """Why an entry was put into cooldown."""
    TIMEOUT = "timeout"
    DECLINED = "declined"


class WaitlistEntry(SupabaseModel):
    """
    A customer's standing request for a service slot.

    ``decline_count`` only ever grows. ``cooldown_until`` is set exactly
    while the entry is in cooldown.
    """
    table_name = "waitlist_entries"
    columns = (
        "id",
        "salon_id",
        "service_id",
        "customer_id",
        "customer_name",
        "customer_email",
        "customer_phone",
        "status",
        "decline_count",
        "cooldown_reason",
        "cooldown_until",
    )
    timestamp_fields = ("cooldown_until", "created_at")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.salon_id = kwargs.get('salon_id')
        self.service_id = kwargs.get('service_id')
        self.customer_id = kwargs.get('customer_id')
        self.customer_name = kwargs.get('customer_name')
        self.customer_email = kwargs.get('customer_email')
        self.customer_phone = kwargs.get('customer_phone')
        self.status = kwargs.get('status', WaitlistStatus.WAITING)
        self.decline_count = kwargs.get('decline_count') or 0
        self.cooldown_reason = kwargs.get('cooldown_reason')

    @property
    def has_contact_channel(self) -> bool:
        return bool(self.customer_phone or self.customer_email)
