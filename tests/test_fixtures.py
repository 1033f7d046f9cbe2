"""Tests for the offline fixture transport."""

import pytest

from receipt_tracker.api import ApiClient, ApiError, Operation, create_transport
from receipt_tracker.api.fixtures import FixtureTransport
from receipt_tracker.api.http import HttpTransport
from receipt_tracker.config import TrackerConfig


@pytest.fixture
def transport():
    return FixtureTransport(delay=0)


@pytest.fixture
def api(transport):
    return ApiClient(transport)


def test_create_transport_selects_by_config():
    """The mock flag picks fixtures; otherwise the network transport."""
    config = TrackerConfig()
    config.api.mock = True
    assert isinstance(create_transport(config), FixtureTransport)
    config.api.mock = False
    assert isinstance(create_transport(config), HttpTransport)


@pytest.mark.asyncio
async def test_fixture_client_is_not_live(api):
    assert api.live is False


@pytest.mark.asyncio
async def test_upload_fixture(api):
    result = await api.upload_document(b"img", "receipt", filename="r.png")
    assert result.merchant == "Mock Store"
    assert result.total_cost == 10.99


@pytest.mark.asyncio
async def test_summary_fixture_by_month(api):
    yearly = await api.get_summary(2025)
    monthly = await api.get_summary(2025, 11)
    assert [m.month for m in yearly.summaries] == [1, 2, 3, 10, 11]
    assert monthly.month == 11
    assert len(monthly.daily_summaries) == 6


@pytest.mark.asyncio
async def test_mutations_are_recorded(api, transport):
    """Mutations succeed without changing the fixtures."""
    assert await api.delete_item("mock-item-1-1") == {}
    week = await api.get_purchases("2025-10-30")
    assert week.find_item("mock-item-1-1") is not None
    assert transport.count(Operation.DELETE_ITEM) == 1
    assert transport.count(Operation.GET_PURCHASES) == 1


@pytest.mark.asyncio
async def test_item_stats_pagination(api):
    first = await api.get_user_item_stats(limit=2)
    assert [i.item_name for i in first.items] == ["Coffee Beans", "Milk"]
    assert first.next_token == "mock-page-2"

    second = await api.get_user_item_stats(limit=2, next_token=first.next_token)
    assert [i.item_name for i in second.items] == ["Bread", "Eggs"]

    last = await api.get_user_item_stats(limit=2, next_token=second.next_token)
    assert [i.item_name for i in last.items] == ["Bananas"]
    assert last.exhausted


@pytest.mark.asyncio
async def test_item_stats_category_filter(api):
    page = await api.get_user_item_stats(category="dairy")
    assert {i.item_name for i in page.items} == {"Milk", "Eggs"}
    assert page.exhausted


@pytest.mark.asyncio
async def test_item_stats_bad_token(api):
    with pytest.raises(ApiError) as exc_info:
        await api.get_user_item_stats(next_token="garbage")
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_global_stats_lookup(api):
    stats = await api.get_global_item_stats("Coffee Beans")
    assert stats.item_name == "Coffee Beans"
    with pytest.raises(ApiError) as exc_info:
        await api.get_global_item_stats("Caviar")
    assert exc_info.value.status_code == 404
