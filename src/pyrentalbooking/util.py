"""Calendar date validation for pickup and dropoff fields.

Dates are plain calendar days in the user's local calendar. Inputs are kept as
``YYYY-MM-DD`` strings so partially typed values can be held without being
judged: a value that is not a complete date is "not yet evaluable" and every
check below passes it through.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from .exceptions import ValidationError

_COMPLETE_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateInput = str | date | None


def today() -> date:
    """Return the local calendar date."""
    return datetime.now().date()


def normalize_date_input(value: DateInput) -> str:
    """Return the stored string form of a date input ("" when cleared)."""
    if value is None:
        return ""
    # datetime is a date subclass; only its calendar day counts.
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        raise ValidationError("Date must be a string, date or None.")
    return value.strip()


def parse_calendar_date(value: DateInput) -> date | None:
    """Parse a complete calendar date, returning None for empty or partial input."""
    text = normalize_date_input(value)
    if not text or not _COMPLETE_DATE_RE.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def is_complete_date(value: DateInput) -> bool:
    return parse_calendar_date(value) is not None


def is_not_past(value: DateInput, reference: date) -> bool:
    """Return False only for a complete date earlier than ``reference``."""
    parsed = parse_calendar_date(value)
    if parsed is None:
        return True
    return parsed >= reference


def is_valid_dropoff(dropoff: DateInput, pickup: DateInput) -> bool:
    """Return False only when both dates are complete and dropoff is not after pickup."""
    dropoff_date = parse_calendar_date(dropoff)
    pickup_date = parse_calendar_date(pickup)
    if dropoff_date is None or pickup_date is None:
        return True
    return dropoff_date > pickup_date


def min_dropoff_date(pickup: DateInput, reference: date) -> date:
    pickup_date = parse_calendar_date(pickup)
    if pickup_date is None:
        return reference
    return pickup_date + timedelta(days=1)


def validate_date_range(
    pickup: DateInput,
    dropoff: DateInput,
    reference: date,
) -> tuple[bool, bool]:
    """Check a pickup/dropoff pair against ``reference``.

    Returns ``(pickup_ok, dropoff_ok)``. Empty and partial values are reported
    as ok; the caller decides how to surface a failure.
    """
    pickup_ok = is_not_past(pickup, reference)
    dropoff_ok = is_not_past(dropoff, reference) and is_valid_dropoff(dropoff, pickup)
    return pickup_ok, dropoff_ok
