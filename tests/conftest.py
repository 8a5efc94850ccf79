"""Shared fixtures: a fixed clock, an in-memory Supabase fake and row factories."""
from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

from app.models import to_iso
from app.services.waitlist.store import WaitlistStore
from app.services.waitlist.transitions import LifecycleLog
from tests.fakes import FakeSupabaseClient, RecordingNotifier

NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def supabase() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def store(supabase) -> WaitlistStore:
    return WaitlistStore(supabase)


@pytest.fixture
def lifecycle_log(store) -> LifecycleLog:
    return LifecycleLog(store)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_entry(supabase):
    counter = itertools.count(1)

    def _make(**overrides) -> Dict[str, Any]:
        row = {
            "id": f"entry-{next(counter)}",
            "salon_id": "salon-1",
            "service_id": "service-1",
            "customer_id": "customer-1",
            "customer_name": "Ingrid",
            "customer_email": "ingrid@example.com",
            "customer_phone": "+4790000000",
            "status": "notified",
            "decline_count": 0,
            "cooldown_reason": None,
            "cooldown_until": None,
        }
        row.update(overrides)
        if isinstance(row["cooldown_until"], datetime):
            row["cooldown_until"] = to_iso(row["cooldown_until"])
        supabase.rows("waitlist_entries").append(row)
        return row

    return _make


@pytest.fixture
def make_offer(supabase, now):
    counter = itertools.count(1)

    def _make(entry: Dict[str, Any], expires_at: datetime = None, **overrides) -> Dict[str, Any]:
        number = next(counter)
        row = {
            "id": f"offer-{number}",
            "salon_id": entry["salon_id"],
            "waitlist_entry_id": entry["id"],
            "service_id": entry["service_id"],
            "employee_id": "employee-1",
            "slot_date": "2026-03-03",
            "slot_start": f"2026-03-03T{9 + number:02d}:00:00+00:00",
            "slot_end": f"2026-03-03T{9 + number:02d}:45:00+00:00",
            "status": "pending",
            "token_expires_at": to_iso(expires_at or now - timedelta(minutes=5)),
            "responded_at": None,
            "response_channel": None,
            "reminder_sent_at": None,
            "token_hash": None,
            "last_error": None,
        }
        row.update(overrides)
        supabase.rows("waitlist_offers").append(row)
        return row

    return _make

