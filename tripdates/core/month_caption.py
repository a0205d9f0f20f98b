from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


# Date-picker captions: "Tháng 10 2025" (vi) or "October 2025" / "Oct 2025" (en)
_VI_CAPTION_RE = re.compile(r"Tháng\s*(\d+).*?(\d{4})")
_EN_CAPTION_RE = re.compile(r"([A-Za-z]+)\s+(\d{4})")

_MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}


@dataclass(frozen=True)
class MonthInfo:
    month: int
    year: int

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}"


def parse_month_caption(text: Optional[str]) -> Optional[MonthInfo]:
    if not text or not text.strip():
        return None

    m = _VI_CAPTION_RE.search(text)
    if m:
        month = int(m.group(1))
        if 1 <= month <= 12:
            return MonthInfo(month=month, year=int(m.group(2)))
        return None

    for em in _EN_CAPTION_RE.finditer(text):
        month = _MONTHS.get(em.group(1).lower())
        if month:
            return MonthInfo(month=month, year=int(em.group(2)))
    return None


def month_difference(current: Optional[MonthInfo], target_year: int, target_month: int) -> int:
    """Months to page forward (positive) or back (negative) to reach the target."""
    if current is None:
        return 0
    return (target_year - current.year) * 12 + (target_month - current.month)
