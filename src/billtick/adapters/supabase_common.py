"""Shared helpers for Supabase-backed repositories."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from postgrest.exceptions import APIError

from billtick.domain.errors import PersistenceError

if TYPE_CHECKING:
    from postgrest import SyncQueryRequestBuilder


def execute(query: SyncQueryRequestBuilder, action: str) -> list[dict[str, object]]:
    """Run a query builder, turning API failures into PersistenceError."""
    try:
        response = query.execute()
    except APIError as exc:
        raise PersistenceError(f"Failed to {action}: {exc.message}") from exc
    return response.data or []


def first_row(rows: list[dict[str, object]], action: str) -> dict[str, object]:
    """Return the first row or fail when the write returned nothing."""
    if not rows:
        raise PersistenceError(f"Failed to {action}")
    return rows[0]


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp column."""
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
