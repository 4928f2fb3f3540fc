"""
Clock time and interval helpers.

Times of day are zero-padded ``HH:MM`` strings and dates are ``YYYY-MM-DD``
strings. Instants are naive local datetimes; no timezone conversion is done.
"""
import re
from datetime import date, datetime, timedelta
from typing import Any, Union

from escape_booking.domains.errors import FormatError

HHMM = re.compile(r"^\d{2}:\d{2}$")
YMD = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Sunday=0 .. Saturday=6
WEEKDAY_KEYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


def is_clock_time(value: Any) -> bool:
    """Return True if value is a valid ``HH:MM`` string."""
    if not isinstance(value, str) or not HHMM.match(value):
        return False
    hours, minutes = int(value[:2]), int(value[3:])
    return hours <= 23 and minutes <= 59


def is_valid_window(start: Any, end: Any) -> bool:
    """Return True if start and end are clock times with start < end."""
    return is_clock_time(start) and is_clock_time(end) and start < end


def is_valid_slot(slot: Any) -> bool:
    """Return True if slot is a mapping with a valid start and end."""
    return isinstance(slot, dict) and is_valid_window(slot.get("start"), slot.get("end"))


def to_minutes(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight.

    Raises:
        FormatError: If the value is not a valid clock time
    """
    if not is_clock_time(value):
        raise FormatError(f"Invalid time: {value!r}")
    return int(value[:2]) * 60 + int(value[3:])


def to_hhmm(minutes: int) -> str:
    """Convert minutes since midnight back to ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_date(value: Union[str, date]) -> date:
    """Parse a ``YYYY-MM-DD`` string into a date.

    Raises:
        FormatError: If the value does not match the pattern or is not a
            real calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not YMD.match(value):
        raise FormatError(f"Invalid date: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise FormatError(f"Invalid date: {value!r}")


def date_key(value: Union[str, date]) -> str:
    """Return the ``YYYY-MM-DD`` form of a date."""
    return parse_date(value).isoformat()


def weekday_key(value: Union[str, date]) -> str:
    """Return the lower-case weekday name for a date."""
    day = parse_date(value)
    # date.weekday() is Monday=0; shift to Sunday=0
    return WEEKDAY_KEYS[(day.weekday() + 1) % 7]


def combine_local(day: Union[str, date], time_of_day: str) -> datetime:
    """Build a naive local datetime from a date and ``HH:MM``."""
    minutes = to_minutes(time_of_day)
    return datetime.combine(parse_date(day), datetime.min.time()) + timedelta(
        minutes=minutes
    )


def add_minutes(instant: datetime, minutes: int) -> datetime:
    """Shift an instant by a number of minutes."""
    return instant + timedelta(minutes=minutes)


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Half-open interval overlap; touching endpoints do not overlap."""
    return a_start < b_end and a_end > b_start
