from __future__ import annotations

from tripdates.core.calendar import parse_iso_date
from tripdates.core.placeholders import UnsupportedPlaceholderError, is_placeholder, parse_placeholder


def is_iso_date(s: str) -> bool:
    try:
        parse_iso_date(s)
        return True
    except ValueError:
        return False


def is_placeholder_token(s: str) -> bool:
    """True only for a bracketed token that names a supported placeholder."""
    try:
        return parse_placeholder(s) is not None
    except UnsupportedPlaceholderError:
        return False


def is_valid_date_or_placeholder(s: str) -> bool:
    return is_iso_date(s) or is_placeholder_token(s)


def is_fixture_date_value(s: str) -> bool:
    """Literal fixture dates must be ISO; bracketed tokens are left to the resolver."""
    return is_iso_date(s) or is_placeholder(s)
