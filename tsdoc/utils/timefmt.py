from __future__ import annotations

"""UTC timestamp helpers for file/folder date conditions.

Condition dates are stored as ``YYYYMMDDHHMMSS`` (optionally followed by a
``.ffffff+zzz`` suffix) in UTC.  They are shown in the host's local zone.
"""

from datetime import datetime, timezone, tzinfo
from typing import Optional

__all__ = ["parse_utc_stamp", "utc_to_local"]

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_utc_stamp(stamp: str) -> Optional[datetime]:
    """Return an aware UTC datetime for *stamp*, or ``None`` if unparseable."""
    digits = (stamp or "").strip()[:14]
    if len(digits) != 14 or not digits.isdigit():
        return None
    try:
        return datetime.strptime(digits, "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def utc_to_local(stamp: str, tz: Optional[tzinfo] = None) -> str:
    """Convert *stamp* to local time text.

    *tz* defaults to the host zone (``datetime.astimezone()`` applies that
    zone's DST rules for the given instant).  Returns ``""`` on bad input.
    """
    dt = parse_utc_stamp(stamp)
    if dt is None:
        return ""
    local = dt.astimezone(tz) if tz is not None else dt.astimezone()
    return local.strftime(DISPLAY_FORMAT)
