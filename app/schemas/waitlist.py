"""Waitlist schemas: resolved cooldown policy, collaborator results and job run summaries."""
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fallbacks when the policy resolver has no row (or no value) for a salon/service
DEFAULT_COOLDOWN_MINUTES = 60
DEFAULT_PASSIVE_DECLINE_THRESHOLD = 3
DEFAULT_PASSIVE_COOLDOWN_MINUTES = 10080  # 7 days


class CooldownPolicy(BaseModel):
    """Per salon/service cooldown penalties."""
    model_config = ConfigDict(frozen=True)

    cooldown_minutes: int = Field(DEFAULT_COOLDOWN_MINUTES, gt=0)
    passive_decline_threshold: int = Field(DEFAULT_PASSIVE_DECLINE_THRESHOLD, gt=0)
    passive_cooldown_minutes: int = Field(DEFAULT_PASSIVE_COOLDOWN_MINUTES, gt=0)

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> "CooldownPolicy":
        """Build a policy from a resolver row; missing or null values take the defaults."""
        if not row:
            return cls()
        values = {key: value for key, value in row.items() if key in cls.model_fields and value is not None}
        return cls(**values)

    def cooldown_for(self, next_decline_count: int) -> Tuple[int, bool]:
        """
        Cooldown length for an entry about to reach ``next_decline_count``.

        Returns ``(minutes, passive_applied)``. Once the count reaches the
        passive threshold every further timeout gets the long penalty.
        """
        if next_decline_count >= self.passive_decline_threshold:
            return self.passive_cooldown_minutes, True
        return self.cooldown_minutes, False


DEFAULT_COOLDOWN_POLICY = CooldownPolicy()


class ChainResult(BaseModel):
    """Outcome of asking the next-candidate notifier to re-offer a freed slot."""
    notified: bool = False
    error: Optional[str] = None
    offer_id: Optional[str] = None

    @field_validator("error")
    @classmethod
    def blank_error_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


class ReminderDelivery(BaseModel):
    """Which channels a reminder actually went out on."""
    sms_sent: bool = False
    email_sent: bool = False

    @property
    def delivered(self) -> bool:
        return self.sms_sent or self.email_sent


class ExpiredOfferRunResult(BaseModel):
    """Counters for one offer-expiry run."""
    processed: int = 0
    chained: int = 0
    errors: int = 0


class ReactivationRunResult(BaseModel):
    """Counters for one cooldown-reactivation run."""
    reactivated: int = 0
    errors: int = 0


class ReminderRunResult(BaseModel):
    """Counters for one reminder run."""
    processed: int = 0
    sent: int = 0
    errors: int = 0
