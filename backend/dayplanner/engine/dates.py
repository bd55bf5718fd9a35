"""
Day-key normalization — pure functions, no I/O.

Day-keys are local calendar days. Strings are split into their
year/month/day parts and never handed to a datetime parser, so no
UTC shift can move a record onto a neighbouring day.
"""
import re
from datetime import date, datetime, timedelta

# ASCII only: str.isdigit would also accept superscripts and other scripts' digits
DAY_KEY_RE = re.compile(r"(\d{1,4})-(\d{1,2})-(\d{1,2})", re.ASCII)


class MalformedDateError(ValueError):
    """A date string that does not decompose into a valid calendar day."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"malformed date: {value!r} (expected YYYY-MM-DD)")


def parse_day_key(text: str) -> date:
    """Build a date from a 'YYYY-MM-DD' string via its integer components."""
    if not isinstance(text, str):
        raise MalformedDateError(text)
    m = DAY_KEY_RE.fullmatch(text.strip())
    if not m:
        raise MalformedDateError(text)
    try:
        year, month, day = (int(g) for g in m.groups())
        return date(year, month, day)
    except ValueError:
        raise MalformedDateError(text) from None


def to_day(value: date | datetime | str) -> date:
    """Normalize a date, datetime or day-key string to a plain date."""
    # datetime subclasses date, so it has to be checked first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_day_key(value)


def format_day_key(value: date | datetime | str) -> str:
    d = to_day(value)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def previous_day(day: date) -> date:
    return day - timedelta(days=1)


def is_future(value: date | datetime | str, now: date | datetime) -> bool:
    """True when value falls strictly after the calendar day of now."""
    return to_day(value) > to_day(now)
