"""Helpers for mapping domain models to store documents.

Documents keep the canonical camelCase field names so existing data stays
readable. Datetimes are stored as ISO 8601 strings in UTC, ids as strings.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

SCHEMA_VERSION = 1


def format_datetime(value: datetime | None) -> str | None:
    """Render a timezone-aware datetime as ISO 8601 (UTC)."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat()


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO 8601 string; naive values are assumed to be UTC."""
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_uuid(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


def parse_uuid(value: str | None) -> UUID | None:
    return UUID(value) if value else None
