from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from tripdates.core.validation import is_fixture_date_value


# Fixture JSON is camelCase; Python attributes are snake_case.
_FIXTURE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _check_date_value(v: str | None) -> str | None:
    if v is None or not v.strip():
        return v  # blank is reported as missing by the provider
    if not is_fixture_date_value(v):
        raise ValueError("date must be ISO YYYY-MM-DD or a <PLACEHOLDER> token")
    return v


class Occupancy(BaseModel):
    rooms: int = 1
    adults: int = 1
    children: int = 0

    model_config = _FIXTURE_CONFIG

    @field_validator("rooms", "adults")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("children")
    @classmethod
    def validate_children(cls, v: int) -> int:
        if v < 0:
            raise ValueError("children must be >= 0")
        return v


class ExpectedResults(BaseModel):
    min_search_results: int | None = None
    max_price: int | None = None
    sort_order: str | None = None

    model_config = _FIXTURE_CONFIG


class DestinationStay(BaseModel):
    destination: str | None = None
    check_in_date: str | None = None
    check_out_date: str | None = None

    model_config = _FIXTURE_CONFIG

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def validate_dates(cls, v: str | None) -> str | None:
        return _check_date_value(v)


class BookingTestData(BaseModel):
    test_name: str | None = None
    description: str | None = None
    destination: str | None = None
    check_in_date: str | None = None
    check_out_date: str | None = None
    occupancy: Occupancy | None = None
    sort_option: str | None = None
    expected_results: ExpectedResults | None = None
    filters: dict[str, Any] | None = None
    destinations: list[DestinationStay] | None = None

    model_config = _FIXTURE_CONFIG

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def validate_dates(cls, v: str | None) -> str | None:
        return _check_date_value(v)
