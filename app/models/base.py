"""Base model for Supabase operations."""
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from enum import Enum


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a Supabase timestamp into an aware datetime.

    PostgREST returns ISO strings (``2025-01-01T10:00:00+00:00`` or with a
    trailing ``Z``). Naive values are assumed to be UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime for a Supabase filter or payload."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class SupabaseModel:
    """
    Base model for Supabase operations.

    Provides common functionality for interacting with Supabase tables.
    Subclasses list the columns they read in ``columns`` and the ones holding
    timestamps in ``timestamp_fields``.
    """

    table_name: str = ""
    columns: tuple = ()
    timestamp_fields: tuple = ()

    def __init__(self, **kwargs):
        """Initialize model with data."""
        for key, value in kwargs.items():
            if key in self.timestamp_fields:
                value = parse_timestamp(value)
            setattr(self, key, value)
        for field in self.timestamp_fields:
            if field not in kwargs:
                setattr(self, field, None)

    @classmethod
    def select_clause(cls) -> str:
        """Comma-separated column list for ``.select()``."""
        return ", ".join(cls.columns) if cls.columns else "*"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SupabaseModel':
        """Create model instance from dictionary."""
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {key: value for key, value in self.__dict__.items() if not key.startswith('_')}

    def to_supabase_dict(self) -> Dict[str, Any]:
        """Convert model to Supabase-compatible dictionary."""
        data = self.to_dict()
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = to_iso(value)
            elif isinstance(value, Enum):
                data[key] = value.value
        return data

    def __repr__(self):
        return f"<{self.__class__.__name__} {getattr(self, 'id', None)}>"
