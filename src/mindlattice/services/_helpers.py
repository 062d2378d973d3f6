"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime; naive values are taken as UTC.

    Examples:
        >>> parse_timestamp("2025-01-02").isoformat()
        '2025-01-02T00:00:00+00:00'
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
