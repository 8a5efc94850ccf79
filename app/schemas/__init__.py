"""Pydantic schemas for the waitlist engine."""

from .waitlist import (
    DEFAULT_COOLDOWN_MINUTES,
    DEFAULT_PASSIVE_DECLINE_THRESHOLD,
    DEFAULT_PASSIVE_COOLDOWN_MINUTES,
    DEFAULT_COOLDOWN_POLICY,
    CooldownPolicy,
    ChainResult,
    ReminderDelivery,
    ExpiredOfferRunResult,
    ReactivationRunResult,
    ReminderRunResult,
)

__all__ = [
    "DEFAULT_COOLDOWN_MINUTES",
    "DEFAULT_PASSIVE_DECLINE_THRESHOLD",
    "DEFAULT_PASSIVE_COOLDOWN_MINUTES",
    "DEFAULT_COOLDOWN_POLICY",
    "CooldownPolicy",
    "ChainResult",
    "ReminderDelivery",
    "ExpiredOfferRunResult",
    "ReactivationRunResult",
    "ReminderRunResult",
]
