"""Period-filter strings for aggregate statistics.

The backend interprets these literally, so the grammar is fixed:
``current-year``, ``YYYY``, ``YYYY-MM`` or ``last-N-months``.
"""

from __future__ import annotations

import re
from enum import Enum

CURRENT_YEAR = "current-year"

_PERIOD_RE = re.compile(
    r"^(?:current-year|\d{4}|\d{4}-(?:0[1-9]|1[0-2])|last-[1-9]\d*-months)$"
)


class TimeFilter(str, Enum):
    CURRENT_YEAR = "current-year"
    YEAR = "year"
    MONTH = "month"
    MONTHS = "months"


def build_period(
    time_filter: TimeFilter | str,
    year: int | None = None,
    month: int | None = None,
    last_months: int | None = None,
) -> str:
    """Build the period string for a time filter selection.

    Raises:
        ValueError: If the selection is missing a value it needs.
    """
    time_filter = TimeFilter(time_filter)

    match time_filter:
        case TimeFilter.CURRENT_YEAR:
            return CURRENT_YEAR
        case TimeFilter.YEAR:
            if year is None:
                raise ValueError("year filter needs a year")
            return f"{year:04d}"
        case TimeFilter.MONTH:
            if year is None or month is None:
                raise ValueError("month filter needs a year and a month")
            if not 1 <= month <= 12:
                raise ValueError(f"month out of range: {month}")
            return f"{year:04d}-{month:02d}"
        case TimeFilter.MONTHS:
            if last_months is None or last_months < 1:
                raise ValueError(f"invalid month count: {last_months!r}")
            return f"last-{last_months}-months"


def is_valid_period(period: str) -> bool:
    return bool(_PERIOD_RE.match(period))


def check_period(period: str | None) -> str | None:
    """Return the period unchanged, or raise if it is outside the grammar."""
    if period is None:
        return None
    if not is_valid_period(period):
        raise ValueError(
            f"invalid period {period!r} "
            "(current-year / YYYY / YYYY-MM / last-N-months)"
        )
    return period
