from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Literal, Optional, Union

import structlog

from tripdates.core.calendar import (
    Weekday,
    add_months,
    first_day_of_month,
    last_day_of_month,
    next_weekday_with_buffer,
    parse_iso_date,
)
from tripdates.core.clock import Clock, SystemClock


log = structlog.get_logger("tripdates.placeholders")

# Matched with fullmatch: a trailing newline makes the value a literal.
_TOKEN_RE = re.compile(r"<(.*)>", re.DOTALL)


# ----- Errors -----


class PlaceholderError(ValueError):
    """Base placeholder resolution error."""


class UnsupportedPlaceholderError(PlaceholderError):
    def __init__(self, token: str, supported: tuple[str, ...] | None = None) -> None:
        self.token = token
        self.supported = tuple(supported if supported is not None else SUPPORTED_PLACEHOLDERS)
        super().__init__(
            f"Unsupported date placeholder '{token}'. Supported placeholders: {', '.join(self.supported)}"
        )


class MissingReferenceDateError(PlaceholderError):
    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Placeholder '{token}' requires a reference (check-in) date")


class InvalidReferenceDateError(PlaceholderError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Reference date must be YYYY-MM-DD, got {value!r}")


class DateOutOfRangeError(PlaceholderError):
    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Placeholder '{token}' resolves outside the supported date range")


# ----- Parsed placeholder variants -----


OffsetUnit = Literal["days", "weeks", "months"]


@dataclass(frozen=True)
class FixedDay:
    """Named day computed from today only (TODAY, LAST_DAY_OF_MONTH, ...)."""

    name: str


@dataclass(frozen=True)
class NextWeekday:
    weekday: Weekday


@dataclass(frozen=True)
class RelativeOffset:
    unit: OffsetUnit
    amount: int  # signed


@dataclass(frozen=True)
class DaysAfterCheckIn:
    days: int


Placeholder = Union[FixedDay, NextWeekday, RelativeOffset, DaysAfterCheckIn]


_FIXED_DAYS: dict[str, Callable[[date], date]] = {
    "TODAY": lambda d: d,
    "TOMORROW": lambda d: d + timedelta(days=1),
    "YESTERDAY": lambda d: d - timedelta(days=1),
    "NEXT_WEEK": lambda d: d + timedelta(weeks=1),
    "NEXT_MONTH": lambda d: add_months(d, 1),
    "FIRST_DAY_OF_MONTH": first_day_of_month,
    "LAST_DAY_OF_MONTH": last_day_of_month,
    "FIRST_DAY_OF_NEXT_MONTH": lambda d: first_day_of_month(add_months(d, 1)),
    "LAST_DAY_OF_NEXT_MONTH": lambda d: last_day_of_month(add_months(d, 1)),
}

_NEXT_WEEKDAYS: dict[str, Weekday] = {f"NEXT_{w.name}": w for w in Weekday}

_OFFSET_PATTERNS: tuple[tuple[re.Pattern[str], OffsetUnit, int], ...] = (
    (re.compile(r"^PLUS_([0-9]+)_DAYS$"), "days", 1),
    (re.compile(r"^MINUS_([0-9]+)_DAYS$"), "days", -1),
    (re.compile(r"^PLUS_([0-9]+)_WEEKS$"), "weeks", 1),
    (re.compile(r"^PLUS_([0-9]+)_MONTHS$"), "months", 1),
)

_CHECK_IN_OFFSET_RE = re.compile(r"^NEXT_FROM_CHECK_IN_DATE_([0-9]+)_DAY$")

SUPPORTED_PLACEHOLDERS: tuple[str, ...] = (
    *(f"<{name}>" for name in ("TODAY", "TOMORROW", "YESTERDAY")),
    *(f"<{name}>" for name in _NEXT_WEEKDAYS),
    "<PLUS_N_DAYS>",
    "<MINUS_N_DAYS>",
    "<PLUS_N_WEEKS>",
    "<PLUS_N_MONTHS>",
    *(
        f"<{name}>"
        for name in (
            "NEXT_WEEK",
            "NEXT_MONTH",
            "FIRST_DAY_OF_MONTH",
            "LAST_DAY_OF_MONTH",
            "FIRST_DAY_OF_NEXT_MONTH",
            "LAST_DAY_OF_NEXT_MONTH",
        )
    ),
    "<NEXT_FROM_CHECK_IN_DATE_N_DAY>",
)


# ----- Parse -----


def is_placeholder(value: str) -> bool:
    return _TOKEN_RE.fullmatch(value) is not None


def _to_int(digits: str, token: str) -> int:
    try:
        return int(digits)
    except ValueError:
        # past the interpreter's int string-conversion limit
        raise UnsupportedPlaceholderError(token) from None


def parse_placeholder(token: str) -> Optional[Placeholder]:
    """Parse a bracketed token into its placeholder variant.

    Returns None for literal values (anything not wrapped in ``<...>``).
    Raises UnsupportedPlaceholderError when the bracketed name matches no grammar.
    """
    m = _TOKEN_RE.fullmatch(token)
    if not m:
        return None
    name = m.group(1).strip().upper()

    if name in _FIXED_DAYS:
        return FixedDay(name)
    if name in _NEXT_WEEKDAYS:
        return NextWeekday(_NEXT_WEEKDAYS[name])
    for pattern, unit, sign in _OFFSET_PATTERNS:
        om = pattern.match(name)
        if om:
            return RelativeOffset(unit, sign * _to_int(om.group(1), token))
    cm = _CHECK_IN_OFFSET_RE.match(name)
    if cm:
        return DaysAfterCheckIn(_to_int(cm.group(1), token))
    raise UnsupportedPlaceholderError(token)


# ----- Resolve -----


def _as_date(d: date) -> date:
    # datetime is a date subclass; drop the time part so output stays YYYY-MM-DD
    return d.date() if isinstance(d, datetime) else d


def _coerce_reference(reference_date: str | date | None) -> Optional[date]:
    if reference_date is None:
        return None
    if isinstance(reference_date, date):
        return _as_date(reference_date)
    if not reference_date.strip():
        return None
    try:
        return parse_iso_date(reference_date.strip())
    except ValueError:
        raise InvalidReferenceDateError(reference_date) from None


def _shift(base: date, offset: RelativeOffset) -> date:
    if offset.unit == "days":
        return base + timedelta(days=offset.amount)
    if offset.unit == "weeks":
        return base + timedelta(weeks=offset.amount)
    return add_months(base, offset.amount)


def resolve_placeholder(
    placeholder: Placeholder,
    reference: Optional[date],
    today: date,
    token: str = "",
) -> date:
    if isinstance(placeholder, DaysAfterCheckIn) and reference is None:
        raise MissingReferenceDateError(token or f"<NEXT_FROM_CHECK_IN_DATE_{placeholder.days}_DAY>")
    try:
        if isinstance(placeholder, FixedDay):
            return _FIXED_DAYS[placeholder.name](today)
        if isinstance(placeholder, NextWeekday):
            return next_weekday_with_buffer(today, placeholder.weekday)
        if isinstance(placeholder, RelativeOffset):
            return _shift(reference or today, placeholder)
        if isinstance(placeholder, DaysAfterCheckIn):
            return reference + timedelta(days=placeholder.days)
    except (OverflowError, ValueError) as e:
        raise DateOutOfRangeError(token or repr(placeholder)) from e
    raise TypeError(f"Unknown placeholder variant: {placeholder!r}")


def resolve_date_placeholder(
    token: str,
    reference_date: str | date | None = None,
    *,
    today: Optional[date] = None,
) -> str:
    """Resolve a date value to ``YYYY-MM-DD``; literal values pass through unchanged.

    ``reference_date`` anchors the PLUS_/MINUS_ offsets and the check-in
    compound; when absent, offsets anchor on ``today`` (defaults to the system date).
    """
    try:
        placeholder = parse_placeholder(token)
    except UnsupportedPlaceholderError as e:
        log.warning("placeholder.unsupported", token=token, supported=list(e.supported))
        raise
    if placeholder is None:
        return token

    base_today = _as_date(today) if today is not None else date.today()
    reference = None
    if isinstance(placeholder, (RelativeOffset, DaysAfterCheckIn)):
        reference = _coerce_reference(reference_date)
    resolved = resolve_placeholder(placeholder, reference, base_today, token=token).isoformat()
    log.debug(
        "placeholder.resolved",
        token=token,
        reference_date=reference.isoformat() if reference else None,
        today=base_today.isoformat(),
        resolved=resolved,
    )
    return resolved


@dataclass(frozen=True)
class DatePlaceholderResolver:
    """Resolver bound to a clock; inject FixedClock for reproducible runs."""

    clock: Clock = SystemClock()

    def today(self) -> date:
        return self.clock.today()

    def resolve(self, token: str, reference_date: str | date | None = None) -> str:
        return resolve_date_placeholder(token, reference_date, today=self.clock.today())

    @property
    def supported_placeholders(self) -> tuple[str, ...]:
        return SUPPORTED_PLACEHOLDERS
