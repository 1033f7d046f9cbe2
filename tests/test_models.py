"""Tests for purchase, summary and stats models."""

import pytest

from receipt_tracker.api import fixture_data
from receipt_tracker.models import (
    MonthlySummary,
    Purchase,
    UploadResult,
    UserItemStatsPage,
    WeeklyPurchases,
    YearlySummary,
    amount_class,
    format_currency,
    parse_summary,
)


@pytest.fixture
def week():
    return WeeklyPurchases.from_dict(fixture_data.WEEKLY_PURCHASES)


def test_amount_class():
    """Negative amounts are refunds and display as negative."""
    assert amount_class(-10.0) == "negative"
    assert amount_class(0) == "zero"
    assert amount_class(12.5) == "positive"


def test_format_currency():
    assert format_currency(12.3) == "$12.30"
    assert format_currency(-10) == "-$10.00"
    assert format_currency(0) == "$0.00"


def test_negative_receipt_is_refund(week):
    """The pharmacy receipt with total -10.00 is classified negative."""
    day, purchase = week.find_purchase("mock-receipt-2")
    assert day == "2025-10-28"
    assert purchase.is_refund
    assert amount_class(purchase.total) == "negative"


def test_purchase_null_amounts():
    """null totals and costs parse as zero."""
    p = Purchase.from_dict(
        {"receiptId": "r1", "merchant": "X", "total": None,
         "items": [{"itemId": "i1", "itemName": "Y", "itemCost": None}]}
    )
    assert p.total == 0.0
    assert p.items[0].item_cost == 0.0


def test_weekly_from_dict(week):
    assert week.week_start == "2025-10-26"
    assert week.week_end == "2025-11-01"
    assert week.total_amount == pytest.approx(130.87)
    assert week.days_with_purchases == 3
    assert week.receipt_count == 3
    assert week.to_dict()["purchases"].keys() == week.purchases.keys()


def test_upload_total_cost():
    """total_cost is the rounded sum of item costs."""
    result = UploadResult.from_dict(
        {"merchant": "M", "items": [
            {"itemName": "A", "itemCost": 10.99},
            {"itemName": "B", "itemCost": 5.00},
        ]}
    )
    assert result.total_cost == 15.99


def test_upload_without_items():
    """No items array means no total."""
    result = UploadResult.from_dict({"merchant": "M"})
    assert result.items == []
    assert result.total_cost is None


def test_parse_summary_by_shape():
    assert isinstance(parse_summary(fixture_data.YEARLY_SUMMARY), YearlySummary)
    monthly = parse_summary(fixture_data.MONTHLY_SUMMARY)
    assert isinstance(monthly, MonthlySummary)
    assert [d.day for d in monthly.daily_summaries] == [1, 2, 3, 4, 5, 6]


def test_item_stats_page_exhausted():
    assert UserItemStatsPage.from_dict({"items": [], "hasMore": False}).exhausted
    # hasMore without a token cannot advance
    assert UserItemStatsPage.from_dict({"items": [], "hasMore": True}).exhausted
    page = UserItemStatsPage.from_dict({"items": [], "hasMore": True, "nextToken": "t"})
    assert not page.exhausted


# --- Optimistic mutations ---


def test_update_item_adjusts_totals(week):
    assert week.update_item("mock-item-1-1", "Drumsticks", 15.00)
    _, purchase, item = week.find_item("mock-item-1-1")
    assert item.item_name == "Drumsticks"
    assert purchase.total == pytest.approx(87.70)
    assert week.total_amount == pytest.approx(133.37)


def test_update_unknown_item(week):
    assert week.update_item("nope", "x", 1.0) is False


def test_remove_item(week):
    removed = week.remove_item("mock-item-0-2")
    assert removed.item_cost == 30.00
    _, purchase = week.find_purchase("mock-receipt-0")
    assert purchase.total == pytest.approx(25.67)
    assert week.total_amount == pytest.approx(100.87)


def test_remove_receipt_recounts_days(week):
    week.remove_receipt("mock-receipt-2")
    assert week.find_purchase("mock-receipt-2") is None
    assert week.total_amount == pytest.approx(140.87)
    assert week.days_with_purchases == 2


def test_move_receipt_within_week(week):
    assert week.move_receipt("mock-receipt-1", "2025-10-27")
    day, _ = week.find_purchase("mock-receipt-1")
    assert day == "2025-10-27"
    assert week.total_amount == pytest.approx(130.87)
    assert week.days_with_purchases == 3


def test_move_receipt_out_of_week(week):
    assert week.move_receipt("mock-receipt-1", "2025-12-25")
    assert week.find_purchase("mock-receipt-1") is None
    assert week.total_amount == pytest.approx(45.67)
    assert week.days_with_purchases == 2


def test_copy_is_independent(week):
    snapshot = week.copy()
    week.remove_receipt("mock-receipt-0")
    assert snapshot.find_purchase("mock-receipt-0") is not None


def test_display(week):
    text = week.display()
    assert "Week 2025-10-26 to 2025-11-01" in text
    assert "-$10.00" in text
    assert "(refund)" in text
