"""Next-candidate notifier interface and the loaders for configured collaborators.

The notifier decides who gets a freed slot and creates their offer. That
logic lives outside this package; the expiry job only calls it.
"""
from importlib import import_module
from typing import Any, Callable, Optional, Protocol, runtime_checkable
import logging

from app.core.exceptions import NotifierConfigurationError
from app.schemas.waitlist import ChainResult

logger = logging.getLogger(__name__)


@runtime_checkable
class NextCandidateNotifier(Protocol):
    def handle_cancellation(
        self,
        salon_id,
        service_id,
        slot_date,
        employee_id,
        slot_start,
        slot_end,
    ) -> ChainResult:
        ...


class NullCandidateNotifier:
    """Used when no notifier is configured: the slot is simply not chained."""

    def handle_cancellation(self, salon_id, service_id, slot_date, employee_id, slot_start, slot_end) -> ChainResult:
        logger.debug(f"No next-candidate notifier configured; slot {slot_start} for salon {salon_id} not chained")
        return ChainResult(notified=False)


class CallableNotifier:
    """Adapts a plain function (returning a ChainResult or a dict) to the notifier interface."""

    def __init__(self, func: Callable[..., Any]):
        self.func = func

    def handle_cancellation(self, salon_id, service_id, slot_date, employee_id, slot_start, slot_end) -> ChainResult:
        result = self.func(salon_id, service_id, slot_date, employee_id, slot_start, slot_end)
        return coerce_chain_result(result)


def coerce_chain_result(result: Any) -> ChainResult:
    if isinstance(result, ChainResult):
        return result
    if isinstance(result, dict):
        return ChainResult(**result)
    if result is None:
        return ChainResult(notified=False)
    raise TypeError(f"Unsupported notifier result: {type(result).__name__}")


def import_from_path(dotted_path: str) -> Any:
    """Import ``"package.module:attr"`` (or ``"package.module.attr"``)."""
    if ":" in dotted_path:
        module_path, _, attr = dotted_path.partition(":")
    else:
        module_path, _, attr = dotted_path.rpartition(".")
    if not module_path or not attr:
        raise NotifierConfigurationError(f"Invalid collaborator path: {dotted_path!r}")
    try:
        module = import_module(module_path)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise NotifierConfigurationError(f"Cannot import {dotted_path!r}: {e}") from e


def build_collaborator(dotted_path: str) -> Any:
    """Classes are instantiated with no arguments; anything else is returned as-is."""
    target = import_from_path(dotted_path)
    if isinstance(target, type):
        return target()
    return target


def load_notifier(dotted_path: Optional[str]) -> NextCandidateNotifier:
    if not dotted_path:
        return NullCandidateNotifier()
    target = build_collaborator(dotted_path)
    if isinstance(target, NextCandidateNotifier):
        return target
    if callable(target):
        return CallableNotifier(target)
    raise NotifierConfigurationError(f"{dotted_path!r} is not a next-candidate notifier")
