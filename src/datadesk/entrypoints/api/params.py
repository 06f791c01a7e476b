"""Shared query parameter parsing."""

from datetime import UTC, datetime

from fastapi import HTTPException


def parse_date_param(value: str | None, name: str) -> datetime | None:
    """Parse an RFC 3339 timestamp or a ``YYYY-MM-DD`` date.

    Naive values are taken as UTC; a bare date means midnight.

    Raises:
        HTTPException: 400 if the value is in neither format.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"invalid {name} format") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
