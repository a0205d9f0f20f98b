from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from tripdates.core.placeholders import DatePlaceholderResolver
from tripdates.data.models import BookingTestData, DestinationStay


log = structlog.get_logger("tripdates.data")


class TestDataError(Exception):
    """Base test-data loading exception."""

    __test__ = False  # not a pytest test class


class FixtureNotFoundError(TestDataError):
    pass


class FixtureFormatError(TestDataError):
    pass


class TestCaseNotFoundError(TestDataError):
    pass


def _resolve_stay(
    resolver: DatePlaceholderResolver, check_in: Optional[str], check_out: Optional[str]
) -> tuple[Optional[str], Optional[str]]:
    # Check-in first: check-out offsets are relative to the resolved check-in.
    resolved_in = resolver.resolve(check_in) if check_in is not None else None
    resolved_out = resolver.resolve(check_out, resolved_in) if check_out is not None else None
    return resolved_in, resolved_out


class TestDataProvider:
    """Loads booking fixtures from JSON and resolves their date placeholders."""

    __test__ = False  # not a pytest test class

    def __init__(self, fixture_path: str | Path, resolver: DatePlaceholderResolver | None = None) -> None:
        self.fixture_path = Path(fixture_path)
        self.resolver = resolver or DatePlaceholderResolver()
        self._test_cases: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._test_cases is not None:
            return self._test_cases
        if not self.fixture_path.exists():
            raise FixtureNotFoundError(f"Could not find test data file: {self.fixture_path}")
        try:
            with self.fixture_path.open("r", encoding="utf-8") as f:
                root = json.load(f)
        except json.JSONDecodeError as e:
            raise FixtureFormatError(f"Invalid JSON in {self.fixture_path}: {e}") from e
        if not isinstance(root, dict):
            raise FixtureFormatError("Fixture root must be a mapping")
        cases = root.get("testCases")
        if not isinstance(cases, dict):
            raise FixtureFormatError("Fixture must contain a 'testCases' mapping")
        self._test_cases = cases
        log.info("test_data.loaded", path=str(self.fixture_path), test_cases=len(cases))
        return cases

    def available_test_cases(self) -> list[str]:
        return list(self._load().keys())

    def get_test_data(self, test_case_id: str) -> BookingTestData:
        cases = self._load()
        raw = cases.get(test_case_id)
        if raw is None:
            raise TestCaseNotFoundError(f"Test case not found: {test_case_id}")
        try:
            data = BookingTestData.model_validate(raw)
        except ValidationError as e:
            raise FixtureFormatError(f"Invalid test data for {test_case_id}: {e}") from e

        check_in, check_out = _resolve_stay(self.resolver, data.check_in_date, data.check_out_date)
        stays: Optional[list[DestinationStay]] = None
        if data.destinations is not None:
            stays = []
            for stay in data.destinations:
                s_in, s_out = _resolve_stay(self.resolver, stay.check_in_date, stay.check_out_date)
                stays.append(stay.model_copy(update={"check_in_date": s_in, "check_out_date": s_out}))

        resolved = data.model_copy(
            update={"check_in_date": check_in, "check_out_date": check_out, "destinations": stays}
        )
        log.info(
            "test_data.retrieved",
            test_case=test_case_id,
            check_in_date=check_in,
            check_out_date=check_out,
        )
        return resolved

    def validate_test_data(self, data: BookingTestData, *required_fields: str) -> bool:
        """Check that every named field is present and non-blank.

        Field names are case-insensitive: destination, checkInDate, checkOutDate, occupancy.
        """
        text_fields = {
            "destination": data.destination,
            "checkindate": data.check_in_date,
            "checkoutdate": data.check_out_date,
        }
        for field in required_fields:
            key = field.lower()
            if key in text_fields:
                value = text_fields[key]
                if value is None or not value.strip():
                    log.error("test_data.missing_field", field=field, test_name=data.test_name)
                    return False
            elif key == "occupancy":
                if data.occupancy is None:
                    log.error("test_data.missing_field", field=field, test_name=data.test_name)
                    return False
            else:
                log.warning("test_data.unknown_validation_field", field=field)
        log.info("test_data.validated", test_name=data.test_name)
        return True

    def log_test_data_info(self, data: BookingTestData) -> None:
        log.info("test_step", step=f"Starting {data.test_name}")
        entries: list[tuple[str, Any]] = [
            ("Destination", data.destination),
            ("Check-in Date", data.check_in_date),
            ("Check-out Date", data.check_out_date),
        ]
        if data.occupancy is not None:
            entries += [
                ("Rooms", data.occupancy.rooms),
                ("Adults", data.occupancy.adults),
                ("Children", data.occupancy.children),
            ]
        entries.append(("Sort Option", data.sort_option))
        for key, value in (data.filters or {}).items():
            entries.append((f"Filter - {key}", value))

        for label, value in entries:
            if value is not None:
                log.info("test_data", label=label, value=str(value))
        log.info("test_data.logged", test_name=data.test_name)
