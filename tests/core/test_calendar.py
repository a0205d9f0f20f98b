from __future__ import annotations

from datetime import date

import pytest

from tripdates.core.calendar import (
    Weekday,
    add_months,
    days_between,
    default_booking_range,
    first_day_of_month,
    flexible_date_range,
    last_day_of_month,
    next_or_same,
    next_weekday_with_buffer,
    parse_iso_date,
)


FRIDAY = date(2025, 9, 19)


def test_weekday_from_string_is_case_insensitive():
    assert Weekday.from_string("friday") is Weekday.FRIDAY
    assert Weekday.from_string("Friday") is Weekday.FRIDAY
    assert Weekday.from_string(" MONDAY ") is Weekday.MONDAY


def test_weekday_from_string_rejects_unknown():
    with pytest.raises(ValueError):
        Weekday.from_string("Funday")


def test_weekday_display_and_from_date():
    assert str(Weekday.WEDNESDAY) == "Wednesday"
    assert Weekday.from_date(FRIDAY) is Weekday.FRIDAY


def test_next_or_same_counts_today():
    assert next_or_same(FRIDAY, Weekday.FRIDAY) == FRIDAY
    assert next_or_same(FRIDAY, Weekday.THURSDAY) == date(2025, 9, 25)


def test_next_weekday_with_buffer_skips_current_week():
    assert next_weekday_with_buffer(FRIDAY, Weekday.FRIDAY) == date(2025, 9, 26)
    # Thursday before: plain next Friday would be tomorrow
    assert next_weekday_with_buffer(date(2025, 9, 18), Weekday.FRIDAY) == date(2025, 9, 26)
    assert next_weekday_with_buffer(date(2025, 9, 20), Weekday.FRIDAY) == date(2025, 10, 3)


def test_add_months_clamps_and_rolls_year():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 12, 31), 2) == date(2026, 2, 28)
    assert add_months(date(2025, 3, 31), -1) == date(2025, 2, 28)
    assert add_months(date(2025, 5, 10), 0) == date(2025, 5, 10)


def test_month_boundaries():
    assert first_day_of_month(FRIDAY) == date(2025, 9, 1)
    assert last_day_of_month(FRIDAY) == date(2025, 9, 30)
    assert last_day_of_month(date(2025, 12, 5)) == date(2025, 12, 31)
    assert last_day_of_month(date(2023, 2, 1)) == date(2023, 2, 28)


def test_days_between_is_signed():
    assert days_between(date(2025, 9, 26), date(2025, 9, 29)) == 3
    assert days_between(date(2025, 9, 29), date(2025, 9, 26)) == -3


def test_flexible_date_range():
    assert flexible_date_range(FRIDAY, Weekday.FRIDAY, 3) == ("2025-09-26", "2025-09-29")
    assert flexible_date_range(FRIDAY, Weekday.MONDAY, 1) == ("2025-09-29", "2025-09-30")
    with pytest.raises(ValueError):
        flexible_date_range(FRIDAY, Weekday.FRIDAY, 0)


def test_default_booking_range_is_friday_plus_three():
    assert default_booking_range(FRIDAY) == ("2025-09-26", "2025-09-29")


def test_parse_iso_date():
    assert parse_iso_date("2025-09-26") == date(2025, 9, 26)
    for bad in ("2025-9-26", "26/09/2025", "2025-02-30", " 2025-09-26"):
        with pytest.raises(ValueError):
            parse_iso_date(bad)
