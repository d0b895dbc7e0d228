"""
Normalization utilities for SQCB field values.

Provides the text coercion applied at ingestion, tolerant timestamp parsing
and date-key normalization used by the classifier and its groupings.
"""

from datetime import date, datetime
from typing import Any, Iterator, Optional

import pandas as pd

# Words pandas resolves against the wall clock; never valid field dates
RELATIVE_DATE_WORDS = frozenset({'now', 'today'})


def to_text(value: Any) -> Optional[str]:
    """
    Coerce a scalar field value to text the way the dashboard displays it.

    Handles:
    - None (returned as None)
    - bool ('true' / 'false')
    - integral floats (3047.0 -> '3047')
    - everything else via str()

    Args:
        value: Raw field value from the API

    Returns:
        Text value, or None when the value is None
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a date or timestamp into a UTC pandas Timestamp.

    Naive values are read as UTC. Offsets and zone names ('GMT', '+07:00')
    are converted to UTC.

    Args:
        value: Date string, datetime, date or Timestamp

    Returns:
        UTC Timestamp, or None if absent or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value or value.lower() in RELATIVE_DATE_WORDS:
            return None
    elif not isinstance(value, (datetime, date)):
        return None

    try:
        ts = pd.to_datetime(value, errors='coerce', utc=True)
    except (ValueError, TypeError, OverflowError):
        return None

    if pd.isna(ts):
        return None
    return ts


def normalize_date(value: Any) -> Optional[str]:
    """
    Normalize a timestamp to its UTC calendar date (YYYY-MM-DD).

    Args:
        value: Date string, datetime, date or Timestamp

    Returns:
        Date in YYYY-MM-DD format, or None if unparseable
    """
    ts = parse_timestamp(value)
    if ts is None:
        return None
    return ts.strftime('%Y-%m-%d')


def resolve_now(now: Any = None) -> pd.Timestamp:
    """
    Resolve the evaluation time to a UTC Timestamp.

    Args:
        now: Evaluation time; None means the current wall-clock time

    Returns:
        UTC Timestamp

    Raises:
        ValueError: If an explicit value cannot be parsed
    """
    if now is None:
        return pd.Timestamp.now(tz='UTC')

    ts = parse_timestamp(now)
    if ts is None:
        raise ValueError(f'Invalid evaluation time: {now!r}')
    return ts


def iter_text_values(value: Any) -> Iterator[str]:
    """
    Yield the text of every non-empty leaf inside a field value.

    Lists, tuples and dicts are walked recursively; falsy leaves (None, '',
    0, False) are skipped.
    """
    if isinstance(value, dict):
        for item in value.values():
            yield from iter_text_values(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_text_values(item)
    elif value:
        yield to_text(value)
