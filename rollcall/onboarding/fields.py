"""Coercion helpers for loosely-typed directory field values.

Directory fields arrive as strings ("true", "Yes", "2024-03-01"), booleans,
lists or nothing at all. These helpers map them onto a small closed set of
booleans, dates and string lists. Malformed values always take the
conservative reading (absent / not yet satisfied), never an exception.
"""

import re
from datetime import date, datetime
from typing import Any

_SPLIT = re.compile(r"[,\n\r]+")

TRUE_STRINGS: frozenset[str] = frozenset({"true", "yes", "y", "1", "x", "checked", "on"})

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
)


def parse_multi_select(value: Any) -> list[str]:
    """Parse a multi-select field into a list of trimmed, non-empty entries.

    Accepts a native list, a comma-separated string or a newline-separated
    string. Returns an empty list (never None) when the value is absent.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [str(item) for item in value if item is not None]
    else:
        items = _SPLIT.split(str(value))
    return [item.strip() for item in items if item and item.strip()]


def parse_date(value: Any) -> date | None:
    """Parse a date from a directory value.

    Accepts date/datetime objects, ISO 8601 dates and datetimes (including a
    trailing ``Z``) and US-style ``MM/DD/YYYY``. Anything else is None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def parse_datetime(value: Any) -> datetime | None:
    """Parse a timestamp; plain dates become midnight."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            pass
    parsed = parse_date(value)
    if parsed is None:
        return None
    return datetime(parsed.year, parsed.month, parsed.day)


def coerce_bool(value: Any) -> bool:
    """Interpret a directory value as a yes/no flag.

    A filled-in date counts as yes: several "submitted" fields store the
    submission date rather than a checkbox.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, (date, datetime)):
        return True
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        return parse_date(text) is not None
    return False


def coerce_optional_bool(value: Any) -> bool | None:
    """Like coerce_bool, but keeps "never recorded" distinct from "no"."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_bool(value)


def years_before(day: date, years: int) -> date:
    """The same calendar day ``years`` earlier; Feb 29 clamps to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def is_within_years(value: Any, years: int, today: date) -> bool:
    """Whether a completion date is still inside its validity window.

    The boundary is inclusive: a date exactly ``years`` before ``today``
    still counts. Absent or unparsable dates are never valid.
    """
    completed = parse_date(value)
    if completed is None:
        return False
    return completed >= years_before(today, years)
