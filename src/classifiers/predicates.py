"""
Record predicates shared by the SQCB category rules.

All predicates are pure and total: a missing or malformed field makes the
predicate False (or True for the "is empty" checks), it never raises.
"""

from typing import Any, Optional

from src.utils.normalization import parse_timestamp, resolve_now

SECONDS_PER_DAY = 24 * 60 * 60


def is_within_n_days(date_str: Any, n: float, now: Any) -> bool:
    """
    Check whether a timestamp lies at most n calendar days before now.

    Elapsed time is measured in fractional calendar days, not working days.
    Dates in the future (negative elapsed time) count as within the window.

    Args:
        date_str: Timestamp to test (typically the record's `modified`)
        n: Window size in days
        now: Evaluation time

    Returns:
        False if the timestamp is absent or unparseable, otherwise
        (now - date) in days <= n
    """
    if not date_str:
        return False

    ts = parse_timestamp(date_str)
    if ts is None:
        return False

    elapsed_days = (resolve_now(now) - ts).total_seconds() / SECONDS_PER_DAY
    return elapsed_days <= n


def is_rma_no_null(rma_no: Optional[Any]) -> bool:
    """
    Check whether an RMA number is missing.

    None and blank strings are missing. The literal text 'null' is a value
    users type into the form and counts as present.
    """
    if rma_no is None:
        return True
    if isinstance(rma_no, str) and rma_no.strip() == '':
        return True
    return False


def status_is(status: Optional[str], *allowed: str) -> bool:
    """Exact-case status membership."""
    return bool(status) and status in allowed


def status_matches(status: Optional[str], expected: str) -> bool:
    """Case-insensitive status comparison."""
    return bool(status) and status.lower() == expected.lower()
