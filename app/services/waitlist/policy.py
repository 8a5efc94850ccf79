"""Cooldown policy lookup for a salon/service pair."""
import logging

from pydantic import ValidationError

from app.core.exceptions import PolicyResolutionError, StoreError
from app.schemas.waitlist import DEFAULT_COOLDOWN_POLICY, CooldownPolicy

logger = logging.getLogger(__name__)


class PolicyResolver:
    """
    Resolves the cooldown policy through the ``resolve_waitlist_policy`` RPC.

    No row means the salon uses the defaults. A failing RPC or an unusable
    row also falls back to the defaults with a warning, so expiry never
    stalls on the lookup. With ``fallback_on_error=False`` it raises
    ``PolicyResolutionError`` instead and the caller fails the row.
    """

    def __init__(self, store, fallback_on_error: bool = True):
        self.store = store
        self.fallback_on_error = fallback_on_error

    def resolve(self, salon_id, service_id) -> CooldownPolicy:
        try:
            row = self.store.resolve_policy_row(salon_id, service_id)
            return CooldownPolicy.from_row(row)
        except (StoreError, ValidationError, TypeError) as e:
            if self.fallback_on_error:
                logger.warning(
                    f"Waitlist policy lookup failed for salon {salon_id}, service {service_id}; using defaults: {e}",
                    extra={"salon_id": salon_id},
                )
                return DEFAULT_COOLDOWN_POLICY
            raise PolicyResolutionError(
                f"Could not resolve waitlist policy for salon {salon_id}, service {service_id}: {e}"
            ) from e
