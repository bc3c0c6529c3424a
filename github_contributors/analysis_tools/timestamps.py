from __future__ import annotations

import re
from datetime import datetime, timezone

import pandas as pd

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Full date, full time and an explicit offset.
_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$"
)


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """RFC-3339 UTC string with second precision, e.g. `2021-03-04T05:06:07Z`."""
    return to_utc(dt).strftime(RFC3339_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC-3339 string into an aware UTC datetime.

    Raises ValueError for anything else, including date-only, offset-less and
    relative ("now", "today") values.
    """
    if not isinstance(value, str) or not _RFC3339_RE.match(value.strip()):
        raise ValueError(f"Invalid timestamp: {value!r}")
    try:
        ts = pd.to_datetime(value.strip(), utc=True, format="ISO8601")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid timestamp: {value!r}") from e
    if pd.isna(ts):
        raise ValueError(f"Invalid timestamp: {value!r}")
    return ts.to_pydatetime()
