# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Wall-clock helpers.

Every expiry comparison and application-side timestamp goes through
:func:`now` so tests can move time by patching a single function.
"""

from datetime import datetime, timezone
from typing import Optional


def now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalise a datetime read back from the database.

    MySQL and SQLite hand back naive values for ``DateTime(timezone=True)``
    columns; the application always writes UTC, so a naive value is UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
