"""
In-memory stand-in for the slice of the supabase-py client the waitlist store uses.

Supports ``table(...).select/update/insert`` with ``eq``, ``lte``, ``gt``,
``is_(col, "null")``, ``order`` and ``limit``, plus ``rpc(...)``. Updates
return the rows they touched, like PostgREST with ``return=representation``.
"""
from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from app.models import parse_timestamp
from app.schemas.waitlist import ChainResult, ReminderDelivery


@dataclass
class FakeResponse:
    data: Any
    count: Optional[int] = None


class FakeAPIError(Exception):
    """Mimics postgrest.exceptions.APIError closely enough for tests."""


def _comparable(value: Any) -> Any:
    if isinstance(value, datetime):
        return parse_timestamp(value)
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except ValueError:
            return value
    return value


@dataclass
class _Failure:
    table: str
    action: str
    error: Exception
    times: Optional[int]
    match: Optional[Callable[[Dict[str, Any]], bool]]


class FakeQuery:
    def __init__(self, client: "FakeSupabaseClient", table: str):
        self.client = client
        self.table_name = table
        self.action = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self.filter_values: Dict[str, Any] = {}
        self.order_by: Optional[tuple] = None
        self.row_limit: Optional[int] = None

    # Builders

    def select(self, columns: str = "*"):
        self.action = "select"
        self.columns = columns
        return self

    def update(self, values: Dict[str, Any]):
        self.action = "update"
        self.payload = dict(values)
        return self

    def insert(self, values: Dict[str, Any]):
        self.action = "insert"
        self.payload = dict(values)
        return self

    def eq(self, column: str, value: Any):
        self.filter_values[column] = value
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def lte(self, column: str, value: Any):
        self.filters.append(
            lambda row: row.get(column) is not None and _comparable(row[column]) <= _comparable(value)
        )
        return self

    def gt(self, column: str, value: Any):
        self.filters.append(
            lambda row: row.get(column) is not None and _comparable(row[column]) > _comparable(value)
        )
        return self

    def is_(self, column: str, value: str):
        assert value == "null", "fake only supports IS NULL"
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, size: int):
        self.row_limit = size
        return self

    # Execution

    def _matching(self) -> List[Dict[str, Any]]:
        rows = [row for row in self.client.tables.setdefault(self.table_name, []) if all(f(row) for f in self.filters)]
        if self.order_by:
            column, desc = self.order_by
            rows.sort(key=lambda row: _comparable(row.get(column)), reverse=desc)
        if self.row_limit is not None:
            rows = rows[: self.row_limit]
        return rows

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        wanted = [column.strip() for column in self.columns.split(",")]
        return {column: copy.deepcopy(row.get(column)) for column in wanted}

    def execute(self) -> FakeResponse:
        self.client.calls.append((self.table_name, self.action, dict(self.filter_values), self.payload))
        self.client.raise_if_failing(self.table_name, self.action, self.filter_values)

        if self.action == "select":
            return FakeResponse(data=[self._project(row) for row in self._matching()])

        if self.action == "update":
            touched = self._matching()
            for row in touched:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse(data=[copy.deepcopy(row) for row in touched])

        if self.action == "insert":
            row = copy.deepcopy(self.payload)
            row.setdefault("id", f"{self.table_name}-{next(self.client.ids)}")
            self.client.tables.setdefault(self.table_name, []).append(row)
            return FakeResponse(data=[copy.deepcopy(row)])

        raise AssertionError(f"unsupported action {self.action}")


class FakeRpc:
    def __init__(self, client: "FakeSupabaseClient", name: str, params: Dict[str, Any]):
        self.client = client
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.client.calls.append((self.name, "rpc", dict(self.params), None))
        self.client.raise_if_failing(self.name, "rpc", self.params)
        handler = self.client.rpc_handlers.get(self.name)
        return FakeResponse(data=handler(self.params) if handler else [])


@dataclass
class FakeSupabaseClient:
    tables: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    rpc_handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = field(default_factory=dict)
    calls: List[tuple] = field(default_factory=list)
    failures: List[_Failure] = field(default_factory=list)
    ids: Any = field(default_factory=lambda: itertools.count(1))

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Dict[str, Any]) -> FakeRpc:
        return FakeRpc(self, name, params)

    # Test helpers

    def fail_on(
        self,
        table: str,
        action: str,
        error: Exception = None,
        times: Optional[int] = None,
        match: Optional[Callable[[Dict[str, Any]], bool]] = None,
    ) -> None:
        """Make matching executions raise; ``match`` sees the query's eq-filters (or rpc params)."""
        self.failures.append(_Failure(table, action, error or FakeAPIError(f"{action} on {table} failed"), times, match))

    def raise_if_failing(self, table: str, action: str, filters: Dict[str, Any]) -> None:
        for failure in self.failures:
            if failure.table != table or failure.action != action:
                continue
            if failure.match is not None and not failure.match(filters):
                continue
            if failure.times is not None:
                if failure.times <= 0:
                    continue
                failure.times -= 1
            raise failure.error

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def row(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
        return next((row for row in self.rows(table) if row.get("id") == row_id), None)

    def count_calls(self, table: str, action: str) -> int:
        return sum(1 for call in self.calls if call[0] == table and call[1] == action)


class RecordingNotifier:
    """Next-candidate notifier double that records calls and replays scripted results."""

    def __init__(self, results: List[Any] = None):
        self.calls: List[tuple] = []
        self.results = list(results or [])

    def handle_cancellation(self, salon_id, service_id, slot_date, employee_id, slot_start, slot_end):
        self.calls.append((salon_id, service_id, slot_date, employee_id, slot_start, slot_end))
        if self.results:
            outcome = self.results.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        return ChainResult(notified=True, offer_id=f"chained-{len(self.calls)}")


def events(supabase: FakeSupabaseClient) -> List[Dict[str, Any]]:
    return supabase.rows("waitlist_lifecycle_events")


class RecordingSender:
    """Reminder sender double; ``delivery`` is returned (or raised) for every send."""

    def __init__(self, delivery: Any = None):
        self.sent: List[tuple] = []
        self.delivery = delivery if delivery is not None else ReminderDelivery(sms_sent=True, email_sent=True)

    def send_reminder(self, offer, entry, token):
        self.sent.append((offer.id, entry.id, token))
        if isinstance(self.delivery, Exception):
            raise self.delivery
        return self.delivery


def notify_nobody(salon_id, service_id, slot_date, employee_id, slot_start, slot_end):
    return None
