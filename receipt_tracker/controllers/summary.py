"""Yearly and monthly spending summary page."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from urllib.parse import urlencode

from ..api import ApiClient
from ..models import DaySummary, MonthlySummary, MonthSummary, YearlySummary
from .base import PageController

VIEW_MODES = ("table", "calendar")


@dataclass
class MonthCell:
    month: int
    label: str
    summary: MonthSummary | None = None

    @property
    def has_data(self) -> bool:
        return self.summary is not None and self.summary.receipt_count > 0


@dataclass
class DayCell:
    """One square of the month calendar; ``day`` is None for leading blanks."""

    day: int | None
    summary: DaySummary | None = None

    @property
    def has_purchases(self) -> bool:
        return self.summary is not None and self.summary.receipt_count > 0


def summary_link(year: int, month: int | None = None) -> str:
    params: dict = {"year": year}
    if month is not None:
        params["month"] = month
    return f"/summary?{urlencode(params)}"


def purchases_link(day: str) -> str:
    return f"/purchases?{urlencode({'date': day})}"


class SummaryController(PageController):
    """Keyed by (year, month?). No month means a yearly rollup by month;
    a month means a daily rollup for that month.

    Switching between table and calendar is a view toggle and never
    re-fetches.
    """

    def __init__(self, api: ApiClient, year: int | None = None, month: int | None = None) -> None:
        super().__init__(api)
        if month is not None and not 1 <= month <= 12:
            raise ValueError(f"month out of range: {month}")
        self.year = year or date.today().year
        self.month = month
        self.view_mode = "table"
        self.data: YearlySummary | MonthlySummary | None = None

    @property
    def title(self) -> str:
        if self.month:
            return f"{calendar.month_name[self.month]} {self.year}"
        return str(self.year)

    async def load(self) -> YearlySummary | MonthlySummary | None:
        self.data = None
        self.data = await self._fetch(lambda: self._api.get_summary(self.year, self.month))
        return self.data

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"unknown view mode {mode!r} (table / calendar)")
        self.view_mode = mode

    # --- Navigation ---

    def previous(self) -> tuple[int, int | None]:
        return self._offset(-1)

    def next(self) -> tuple[int, int | None]:
        return self._offset(1)

    def _offset(self, step: int) -> tuple[int, int | None]:
        if self.month is None:
            return self.year + step, None
        index = self.year * 12 + (self.month - 1) + step
        return index // 12, index % 12 + 1

    def previous_link(self) -> str:
        return summary_link(*self.previous())

    def next_link(self) -> str:
        return summary_link(*self.next())

    def month_link(self, month: int) -> str:
        return summary_link(self.year, month)

    @staticmethod
    def day_link(day: DaySummary) -> str | None:
        """Days without receipts are not clickable."""
        if day.receipt_count <= 0:
            return None
        return purchases_link(day.date)

    # --- Calendar layouts ---

    def year_calendar(self) -> list[MonthCell]:
        if not isinstance(self.data, YearlySummary):
            return []
        by_month = {s.month: s for s in self.data.summaries}
        return [
            MonthCell(month=m, label=calendar.month_abbr[m], summary=by_month.get(m))
            for m in range(1, 13)
        ]

    def month_calendar(self) -> list[DayCell]:
        """Cells for a Sunday-first grid: blanks up to the 1st, then each day."""
        if not isinstance(self.data, MonthlySummary):
            return []
        year, month = self.data.year, self.data.month
        by_day = {d.day: d for d in self.data.daily_summaries}

        # calendar.monthrange gives Monday=0; shift so Sunday=0
        first_weekday, days_in_month = calendar.monthrange(year, month)
        leading = (first_weekday + 1) % 7

        cells = [DayCell(day=None) for _ in range(leading)]
        cells.extend(
            DayCell(day=d, summary=by_day.get(d)) for d in range(1, days_in_month + 1)
        )
        return cells
