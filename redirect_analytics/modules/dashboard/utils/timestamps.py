from __future__ import annotations

from datetime import UTC, date, datetime
from email.utils import parsedate_to_datetime
from typing import Any, Optional


def _parse_text(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    # RFC 2822, e.g. "Mon, 01 Jan 2024 08:00:00 GMT"
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an event timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (a trailing ``Z`` is allowed), RFC 2822 date
    strings and datetime instances. Naive values are read as UTC. Returns
    None for anything that is not a valid instant.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = _parse_text(text)
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def utc_date_key(moment: datetime) -> date:
    return moment.astimezone(UTC).date()
