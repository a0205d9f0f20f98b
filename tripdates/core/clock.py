from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Clock(Protocol):
    def today(self) -> date:
        ...


@dataclass(frozen=True)
class SystemClock:
    """Reads the wall clock; ``timezone`` pins which calendar day counts as today."""

    timezone: Optional[str] = None

    def __post_init__(self) -> None:
        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {self.timezone}") from e

    def today(self) -> date:
        if self.timezone:
            return datetime.now(ZoneInfo(self.timezone)).date()
        return date.today()


@dataclass(frozen=True)
class FixedClock:
    value: date

    def today(self) -> date:
        return self.value
