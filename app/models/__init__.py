"""
Database models package.

This file makes it easy to import all models at once.
"""

from .base import SupabaseModel, parse_timestamp, to_iso
from .waitlist_entry import WaitlistEntry, WaitlistStatus, CooldownReason
from .waitlist_offer import WaitlistOffer, OfferStatus, ResponseChannel
from .lifecycle_event import WaitlistLifecycleEvent, LifecycleReason

__all__ = [
    "SupabaseModel",
    "parse_timestamp",
    "to_iso",
    "WaitlistEntry",
    "WaitlistStatus",
    "CooldownReason",
    "WaitlistOffer",
    "OfferStatus",
    "ResponseChannel",
    "WaitlistLifecycleEvent",
    "LifecycleReason",
]
