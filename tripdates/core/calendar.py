from __future__ import annotations

import calendar as _stdcal
import re
from datetime import date, datetime, timedelta
from enum import Enum


_ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

# Weeks skipped before searching for a weekday; the booking date picker
# rejects selections inside the current week.
WEEKDAY_BUFFER_WEEKS = 1


class Weekday(Enum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_string(cls, name: str) -> "Weekday":
        key = (name or "").strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Invalid day name: {name}") from None

    @classmethod
    def from_date(cls, d: date) -> "Weekday":
        return cls(d.weekday())

    def __str__(self) -> str:
        return self.display_name


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    if not _ISO_DATE_RE.match(value):
        raise ValueError(f"Not an ISO date (YYYY-MM-DD): {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def next_or_same(d: date, weekday: Weekday) -> date:
    return d + timedelta(days=(weekday.value - d.weekday()) % 7)


def next_weekday_with_buffer(today: date, weekday: Weekday) -> date:
    """First ``weekday`` on or after ``today`` plus the buffer weeks.

    On a Friday, the next Friday is one week out rather than today.
    """
    return next_or_same(today + timedelta(weeks=WEEKDAY_BUFFER_WEEKS), weekday)


def add_months(d: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, _stdcal.monthrange(year, month)[1])
    return date(year, month, day)


def first_day_of_month(d: date) -> date:
    return d.replace(day=1)


def last_day_of_month(d: date) -> date:
    return first_day_of_month(add_months(d, 1)) - timedelta(days=1)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def flexible_date_range(today: date, weekday: Weekday, nights: int) -> tuple[str, str]:
    """Check-in on the buffered next ``weekday``, check-out ``nights`` later."""
    if nights < 1:
        raise ValueError("nights must be >= 1")
    check_in = next_weekday_with_buffer(today, weekday)
    check_out = check_in + timedelta(days=nights)
    return check_in.isoformat(), check_out.isoformat()


def default_booking_range(today: date) -> tuple[str, str]:
    # Friday check-in, three nights: the weekend stay most suites book
    return flexible_date_range(today, Weekday.FRIDAY, 3)
