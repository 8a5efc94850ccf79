"""Safe Supabase query helpers for the batch jobs."""
from typing import Any, Dict, List
import logging

from app.core.exceptions import StoreError

logger = logging.getLogger(__name__)


def safe_execute(query, table_name: str, action: str) -> List[Dict[str, Any]]:
    """Execute a built PostgREST query and return its rows, wrapping client errors in StoreError."""
    try:
        response = query.execute()
    except Exception as e:
        logger.error(f"Database error during {action} on {table_name}: {e}")
        raise StoreError(table_name, action, e) from e

    if response is None or not response.data:
        return []
    return list(response.data)


def safe_supabase_insert(supabase, table_name: str, data: dict) -> Dict[str, Any]:
    """Insert one row and return it (or the payload if the store returned nothing)."""
    rows = safe_execute(supabase.table(table_name).insert(data), table_name, "insert")
    return rows[0] if rows else data


def safe_supabase_update(supabase, table_name: str, data: dict, filter_field: str, filter_value) -> int:
    """Unconditional single-key update; returns the number of rows touched."""
    query = supabase.table(table_name).update(data).eq(filter_field, filter_value)
    return len(safe_execute(query, table_name, "update"))


def conditional_supabase_update(
    supabase,
    table_name: str,
    data: dict,
    row_id,
    expected_status: str,
    null_fields: tuple = (),
) -> bool:
    """
    Compare-and-swap update keyed on the row's current status.

    Adds ``status = expected_status`` (and ``field IS NULL`` for each of
    ``null_fields``) to the filter. Returns False when no row matched, which
    means another writer already moved the row on.
    """
    query = (
        supabase.table(table_name)
        .update(data)
        .eq("id", row_id)
        .eq("status", expected_status)
    )
    for field in null_fields:
        query = query.is_(field, "null")
    return len(safe_execute(query, table_name, "conditional update")) > 0
