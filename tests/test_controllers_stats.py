"""Tests for the statistics controller."""

import asyncio
from datetime import date

import pytest

from receipt_tracker.api import ApiClient, Operation
from receipt_tracker.api.fixtures import FixtureTransport
from receipt_tracker.controllers import LoadState, StatsController, StatsTab
from receipt_tracker.periods import TimeFilter


@pytest.fixture
def transport():
    return FixtureTransport(delay=0)


@pytest.fixture
def page(transport):
    return StatsController(ApiClient(transport), page_size=2, today=date(2025, 11, 5))


def names(items):
    return [i.item_name for i in items]


@pytest.mark.asyncio
async def test_summary_tab(page, transport):
    await page.activate("summary")
    assert page.summary_stats.total_spent == pytest.approx(393.53)
    assert transport.requests[-1].query == {}


@pytest.mark.asyncio
async def test_categories_tab_uses_period(page, transport):
    await page.set_time_filter(TimeFilter.MONTH, year=2025, month=3)
    await page.activate(StatsTab.CATEGORIES)
    assert [c.category for c in page.category_stats.categories] == [
        "Beverages", "Dairy", "Bakery", "Fruits",
    ]
    assert transport.requests[-1].query == {"period": "2025-03"}


@pytest.mark.asyncio
async def test_pagination_strictly_advances(page, transport):
    """Each page is fetched with the token the previous page returned."""
    await page.activate(StatsTab.ITEMS)
    assert names(page.page_items) == ["Coffee Beans", "Milk"]
    assert page.page_tokens == [None, "mock-page-2"]

    assert await page.next_page()
    assert page.current_page == 1
    assert names(page.page_items) == ["Bread", "Eggs"]
    assert transport.requests[-1].query["nextToken"] == "mock-page-2"

    assert await page.next_page()
    assert names(page.page_items) == ["Bananas"]
    assert not page.has_more
    assert not page.has_next_page
    assert page.page_tokens == [None, "mock-page-2", "mock-page-4"]
    assert await page.next_page() is False


@pytest.mark.asyncio
async def test_cached_page_makes_no_request(page, transport):
    """Going back to page 1 is served from the cache."""
    await page.activate(StatsTab.ITEMS)
    await page.next_page()
    fetched = transport.count(Operation.GET_USER_ITEM_STATS)

    assert await page.previous_page()
    assert page.current_page == 0
    assert names(page.page_items) == ["Coffee Beans", "Milk"]
    assert transport.count(Operation.GET_USER_ITEM_STATS) == fetched

    assert await page.go_to_page(1)
    assert transport.count(Operation.GET_USER_ITEM_STATS) == fetched


@pytest.mark.asyncio
async def test_go_to_unknown_page(page):
    await page.activate(StatsTab.ITEMS)
    assert await page.go_to_page(5) is False
    assert await page.go_to_page(-1) is False


@pytest.mark.asyncio
async def test_load_more_appends(page):
    await page.activate(StatsTab.ITEMS)
    assert await page.load_more()
    assert await page.load_more()
    assert names(page.all_items) == ["Coffee Beans", "Milk", "Bread", "Eggs", "Bananas"]
    assert await page.load_more() is False


@pytest.mark.asyncio
async def test_loading_disables_controls(page, transport):
    await page.activate(StatsTab.ITEMS)
    before = len(transport.requests)
    page.state = LoadState.LOADING

    assert await page.load_more() is False
    assert await page.next_page() is False
    assert await page.go_to_page(0) is False
    assert await page.search_global("milk") is False
    assert len(transport.requests) == before


@pytest.mark.asyncio
async def test_concurrent_next_page_is_ignored():
    transport = FixtureTransport(delay=0.01)
    page = StatsController(ApiClient(transport), page_size=2)
    await page.activate(StatsTab.ITEMS)

    results = await asyncio.gather(page.next_page(), page.next_page())
    assert sorted(results) == [False, True]
    assert page.current_page == 1
    assert transport.count(Operation.GET_USER_ITEM_STATS) == 2


@pytest.mark.asyncio
async def test_time_filter_resets_items(page, transport):
    await page.activate(StatsTab.ITEMS)
    await page.next_page()
    await page.set_time_filter(TimeFilter.MONTHS, last_months=6)
    assert page.current_page == 0
    assert page.page_tokens == [None, "mock-page-2"]
    assert transport.requests[-1].query["period"] == "last-6-months"
    assert "nextToken" not in transport.requests[-1].query


@pytest.mark.asyncio
async def test_time_filter_needs_values(page):
    with pytest.raises(ValueError):
        await page.set_time_filter(TimeFilter.MONTH, month=13)


@pytest.mark.asyncio
async def test_category_scopes_pagination(page, transport):
    await page.activate(StatsTab.ITEMS)
    await page.set_item_category("Dairy")
    assert names(page.page_items) == ["Milk", "Eggs"]
    assert not page.has_more
    assert transport.requests[-1].query["category"] == "Dairy"


@pytest.mark.asyncio
async def test_item_share(page):
    await page.activate(StatsTab.ITEMS)
    coffee, milk = page.page_items
    assert page.item_share(coffee) == pytest.approx(156.78 / (156.78 + 89.45) * 100)
    assert page.item_share(coffee) + page.item_share(milk) == pytest.approx(100)


@pytest.mark.asyncio
async def test_search_global(page, transport):
    assert await page.search_global("   ") is False
    assert transport.requests == []

    assert await page.search_global("  Milk ")
    assert page.global_stats.item_name == "Milk"
    assert transport.requests[-1].query == {"itemName": "Milk"}

    assert await page.search_global("Caviar") is False
    assert page.global_stats is None
    assert page.error


@pytest.mark.asyncio
async def test_global_tab_does_not_fetch(page, transport):
    await page.activate(StatsTab.GLOBAL)
    assert transport.requests == []
