"""Spending statistics page: summary, items, categories and global lookup."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum

from ..api import ApiClient
from ..models import (
    GlobalItemStats,
    UserCategoryStats,
    UserItemStats,
    UserItemStatsPage,
    UserSummaryStats,
)
from ..periods import TimeFilter, build_period
from .base import PageController

logger = logging.getLogger(__name__)

LAST_MONTHS_CHOICES = (3, 6, 12)


class StatsTab(str, Enum):
    SUMMARY = "summary"
    ITEMS = "items"
    CATEGORIES = "categories"
    GLOBAL = "global"


class StatsController(PageController):
    """Four tabs, each fetched when it becomes active or its filter changes.

    The items tab pages through results with opaque tokens. ``page_tokens[i]``
    is the token that fetched page ``i`` (page 0 uses None) and fetched pages
    are kept, so going back to a page already seen makes no request.

    While a request is outstanding, the paging and search actions do nothing
    and return False.
    """

    def __init__(
        self,
        api: ApiClient,
        page_size: int = 20,
        today: date | None = None,
    ) -> None:
        super().__init__(api)
        today = today or date.today()
        self.page_size = page_size
        self.active_tab = StatsTab.SUMMARY

        self.time_filter = TimeFilter.CURRENT_YEAR
        self.selected_year = today.year
        self.selected_month = today.month
        self.last_months = 3

        self.summary_stats: UserSummaryStats | None = None
        self.category_stats: UserCategoryStats | None = None
        self.global_stats: GlobalItemStats | None = None
        self.global_item_name = ""

        self.item_category: str | None = None
        self.current_page = 0
        self.page_tokens: list[str | None] = [None]
        self._pages: dict[int, UserItemStatsPage] = {}

    @property
    def period(self) -> str:
        return build_period(
            self.time_filter,
            year=self.selected_year,
            month=self.selected_month,
            last_months=self.last_months,
        )

    # --- Tabs and filters ---

    async def activate(self, tab: StatsTab | str) -> None:
        self.active_tab = StatsTab(tab)
        await self.refresh()

    async def set_time_filter(
        self,
        time_filter: TimeFilter | str,
        year: int | None = None,
        month: int | None = None,
        last_months: int | None = None,
    ) -> None:
        self.configure(time_filter, year, month, last_months)
        await self.refresh()

    def configure(
        self,
        time_filter: TimeFilter | str,
        year: int | None = None,
        month: int | None = None,
        last_months: int | None = None,
    ) -> None:
        """Set the time filter without fetching anything."""
        self.time_filter = TimeFilter(time_filter)
        if year is not None:
            self.selected_year = year
        if month is not None:
            if not 1 <= month <= 12:
                raise ValueError(f"month out of range: {month}")
            self.selected_month = month
        if last_months is not None:
            if last_months < 1:
                raise ValueError(f"invalid month count: {last_months}")
            self.last_months = last_months
        # Raises ValueError for an incomplete combination
        build_period(
            self.time_filter, self.selected_year, self.selected_month, self.last_months
        )
        self._reset_items()

    async def refresh(self) -> None:
        match self.active_tab:
            case StatsTab.SUMMARY:
                await self.load_summary()
            case StatsTab.ITEMS:
                await self.load_items()
            case StatsTab.CATEGORIES:
                await self.load_categories()
            case StatsTab.GLOBAL:
                # Lookup only runs when the user searches
                pass

    async def load_summary(self) -> None:
        self.summary_stats = await self._fetch(self._api.get_user_summary_stats)

    async def load_categories(self) -> None:
        period = self.period
        self.category_stats = await self._fetch(
            lambda: self._api.get_user_category_stats(period)
        )

    # --- Items paging ---

    def _reset_items(self) -> None:
        self.current_page = 0
        self.page_tokens = [None]
        self._pages = {}

    async def load_items(self) -> bool:
        """Start the item list over from the first page."""
        self._reset_items()
        return await self._fetch_page(0) is not None

    async def set_item_category(self, category: str | None) -> bool:
        self.item_category = category or None
        return await self.load_items()

    @property
    def page(self) -> UserItemStatsPage | None:
        return self._pages.get(self.current_page)

    @property
    def page_items(self) -> list[UserItemStats]:
        page = self.page
        return page.items if page else []

    @property
    def all_items(self) -> list[UserItemStats]:
        """Every item from the pages loaded so far, in page order."""
        items: list[UserItemStats] = []
        for index in sorted(self._pages):
            items.extend(self._pages[index].items)
        return items

    @property
    def has_more(self) -> bool:
        if not self._pages:
            return False
        return not self._pages[max(self._pages)].exhausted

    @property
    def has_next_page(self) -> bool:
        return self.current_page + 1 < len(self.page_tokens)

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 0

    async def _fetch_page(self, index: int) -> UserItemStatsPage | None:
        token = self.page_tokens[index]
        period = self.period
        category = self.item_category
        page = await self._fetch(
            lambda: self._api.get_user_item_stats(
                self.page_size, token, period, category
            )
        )
        if page is None:
            return None

        self._pages[index] = page
        self.current_page = index
        if not page.exhausted and page.next_token in self.page_tokens[: index + 1]:
            logger.warning("Item stats token repeated on page %d; stopping", index)
            page.has_more = False
        if not page.exhausted:
            if len(self.page_tokens) == index + 1:
                self.page_tokens.append(page.next_token)
            else:
                self.page_tokens[index + 1] = page.next_token
        return page

    async def load_more(self) -> bool:
        """Append the next unseen page to ``all_items``."""
        if self.loading or not self.has_more:
            return False
        return await self._fetch_page(max(self._pages) + 1) is not None

    async def go_to_page(self, index: int) -> bool:
        if self.loading or index < 0:
            return False
        if index in self._pages:
            self.current_page = index
            return True
        if index >= len(self.page_tokens):
            # No token for that page yet
            return False
        return await self._fetch_page(index) is not None

    async def next_page(self) -> bool:
        return await self.go_to_page(self.current_page + 1)

    async def previous_page(self) -> bool:
        return await self.go_to_page(self.current_page - 1)

    def item_share(self, item: UserItemStats) -> float:
        """The item's share of spend across the loaded items, in percent."""
        total = sum(i.total_spent for i in self.all_items)
        if total <= 0:
            return 0.0
        return item.total_spent / total * 100

    # --- Global lookup ---

    async def search_global(self, item_name: str) -> bool:
        if self.loading:
            return False
        name = item_name.strip()
        self.global_item_name = name
        if not name:
            return False
        self.global_stats = await self._fetch(
            lambda: self._api.get_global_item_stats(name)
        )
        return self.global_stats is not None
