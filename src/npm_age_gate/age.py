"""Release age calculation."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

_ONE_DAY = timedelta(days=1)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 registry timestamp into an aware UTC datetime.

    Raises ValueError on malformed input.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def calculate_age(published: datetime | str, now: datetime | None = None) -> int:
    """Return the number of whole days between ``published`` and ``now``, rounded up.

    The difference is absolute, so a timestamp in the future counts the same
    as one equally far in the past.
    """
    if isinstance(published, str):
        published = parse_timestamp(published)
    elif published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return math.ceil(abs(current - published) / _ONE_DAY)
