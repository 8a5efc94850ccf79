"""Exceptions raised inside the waitlist engine.

None of these escape the job entry points; they are caught per row or per
batch and turned into error counters.
"""


class WaitlistEngineError(Exception):
    """Base class for waitlist engine errors."""


class StoreError(WaitlistEngineError):
    """A Supabase read or write failed."""

    def __init__(self, table: str, action: str, cause: Exception = None):
        self.table = table
        self.action = action
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{action} on {table} failed{detail}")


class PolicyResolutionError(WaitlistEngineError):
    """The cooldown policy could not be resolved for a salon/service."""


class NotifierConfigurationError(WaitlistEngineError):
    """A configured collaborator path could not be imported or built."""
