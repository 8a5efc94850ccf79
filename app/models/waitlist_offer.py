"""Waitlist offer model: one proposed slot sent to one waitlist entry."""
from enum import Enum
from app.models.base import SupabaseModel


class OfferStatus(str, Enum):
    """Offer status enumeration. Terminal once an offer leaves PENDING."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class ResponseChannel(str, Enum):
    """How an offer was answered."""
    SYSTEM = "system"
    SMS = "sms"
    EMAIL = "email"
    WEB = "web"


class WaitlistOffer(SupabaseModel):
    """A specific slot proposed to one waitlist entry, with an expiring claim token."""
    table_name = "waitlist_offers"
    columns = (
        "id",
        "salon_id",
        "waitlist_entry_id",
        "service_id",
        "employee_id",
        "slot_date",
        "slot_start",
        "slot_end",
        "status",
        "token_expires_at",
    )
    timestamp_fields = ("token_expires_at", "responded_at", "reminder_sent_at")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.salon_id = kwargs.get('salon_id')
        self.waitlist_entry_id = kwargs.get('waitlist_entry_id')
        self.service_id = kwargs.get('service_id')
        self.employee_id = kwargs.get('employee_id')
        # Slot values are passed through untouched to the next-candidate notifier
        self.slot_date = kwargs.get('slot_date')
        self.slot_start = kwargs.get('slot_start')
        self.slot_end = kwargs.get('slot_end')
        self.status = kwargs.get('status', OfferStatus.PENDING)
        self.response_channel = kwargs.get('response_channel')
