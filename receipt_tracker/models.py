"""Data models for purchases, summaries and spending statistics.

The backend speaks camelCase JSON; every record here has a ``from_dict``
that accepts that shape, ignores unknown keys and treats ``null`` amounts
as zero.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date
from typing import Any


def _amount(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def amount_class(amount: float) -> str:
    """Classify a signed amount for display: negative amounts are refunds."""
    if amount < 0:
        return "negative"
    if amount > 0:
        return "positive"
    return "zero"


def format_currency(amount: float) -> str:
    """Format an amount as dollars, keeping the sign in front: ``-$10.00``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):.2f}"


@dataclass
class Item:
    """A single line on a receipt."""

    item_id: str
    item_name: str
    item_cost: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> Item:
        return cls(
            item_id=str(data.get("itemId", "")),
            item_name=data.get("itemName", "") or "",
            item_cost=_amount(data.get("itemCost")),
        )

    def to_dict(self) -> dict:
        return {
            "itemId": self.item_id,
            "itemName": self.item_name,
            "itemCost": self.item_cost,
        }


@dataclass
class Purchase:
    """One recorded receipt."""

    receipt_id: str
    merchant: str
    total: float = 0.0
    timestamp: str = ""
    items: list[Item] = field(default_factory=list)

    @property
    def is_refund(self) -> bool:
        return self.total < 0

    @classmethod
    def from_dict(cls, data: dict) -> Purchase:
        return cls(
            receipt_id=str(data.get("receiptId", "")),
            merchant=data.get("merchant", "") or "",
            total=_amount(data.get("total")),
            timestamp=data.get("timestamp", "") or "",
            items=[Item.from_dict(i) for i in data.get("items") or []],
        )

    def to_dict(self) -> dict:
        return {
            "receiptId": self.receipt_id,
            "merchant": self.merchant,
            "total": self.total,
            "timestamp": self.timestamp,
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class WeeklyPurchases:
    """Purchases for one week, bucketed by ISO date."""

    week_start: str
    week_end: str
    total_days: int = 7
    days_with_purchases: int = 0
    total_amount: float = 0.0
    purchases: dict[str, list[Purchase]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> WeeklyPurchases:
        buckets = data.get("purchases") or {}
        return cls(
            week_start=data.get("weekStart", ""),
            week_end=data.get("weekEnd", ""),
            total_days=int(data.get("totalDays", 7) or 0),
            days_with_purchases=int(data.get("daysWithPurchases", 0) or 0),
            total_amount=_amount(data.get("totalAmount")),
            purchases={
                day: [Purchase.from_dict(p) for p in plist or []]
                for day, plist in buckets.items()
            },
        )

    def to_dict(self) -> dict:
        return {
            "weekStart": self.week_start,
            "weekEnd": self.week_end,
            "totalDays": self.total_days,
            "daysWithPurchases": self.days_with_purchases,
            "totalAmount": self.total_amount,
            "purchases": {
                day: [p.to_dict() for p in plist]
                for day, plist in self.purchases.items()
            },
        }

    def copy(self) -> WeeklyPurchases:
        return copy.deepcopy(self)

    @property
    def receipt_count(self) -> int:
        return sum(len(plist) for plist in self.purchases.values())

    def contains_date(self, day: str) -> bool:
        if not self.week_start or not self.week_end:
            return day in self.purchases
        return self.week_start <= day <= self.week_end

    def find_purchase(self, receipt_id: str) -> tuple[str, Purchase] | None:
        for day, plist in self.purchases.items():
            for purchase in plist:
                if purchase.receipt_id == receipt_id:
                    return day, purchase
        return None

    def find_item(self, item_id: str) -> tuple[str, Purchase, Item] | None:
        for day, plist in self.purchases.items():
            for purchase in plist:
                for item in purchase.items:
                    if item.item_id == item_id:
                        return day, purchase, item
        return None

    # --- Optimistic local mutations ---
    # These keep total_amount and days_with_purchases consistent with the
    # local edit until the server's numbers replace them on the next fetch.

    def update_item(self, item_id: str, item_name: str, item_cost: float) -> bool:
        found = self.find_item(item_id)
        if found is None:
            return False
        _, purchase, item = found
        delta = item_cost - item.item_cost
        item.item_name = item_name
        item.item_cost = item_cost
        purchase.total = round(purchase.total + delta, 2)
        self.total_amount = round(self.total_amount + delta, 2)
        return True

    def remove_item(self, item_id: str) -> Item | None:
        found = self.find_item(item_id)
        if found is None:
            return None
        _, purchase, item = found
        purchase.items.remove(item)
        purchase.total = round(purchase.total - item.item_cost, 2)
        self.total_amount = round(self.total_amount - item.item_cost, 2)
        return item

    def remove_receipt(self, receipt_id: str) -> Purchase | None:
        found = self.find_purchase(receipt_id)
        if found is None:
            return None
        day, purchase = found
        self.purchases[day].remove(purchase)
        self.total_amount = round(self.total_amount - purchase.total, 2)
        self._recount_days()
        return purchase

    def move_receipt(self, receipt_id: str, new_date: str) -> bool:
        """Re-date a receipt; it leaves the week if the new date is outside it."""
        found = self.find_purchase(receipt_id)
        if found is None:
            return False
        day, purchase = found
        if day == new_date:
            return True
        self.purchases[day].remove(purchase)
        if self.contains_date(new_date):
            self.purchases.setdefault(new_date, []).append(purchase)
        else:
            self.total_amount = round(self.total_amount - purchase.total, 2)
        self._recount_days()
        return True

    def _recount_days(self) -> None:
        days = sum(1 for plist in self.purchases.values() if plist)
        self.days_with_purchases = min(days, self.total_days)

    def display(self) -> str:
        """Format the week for terminal display."""
        lines: list[str] = []
        lines.append(f"Week {self.week_start} to {self.week_end}")
        lines.append(
            f"Total spent: {format_currency(self.total_amount)}   "
            f"Active days: {self.days_with_purchases} / {self.total_days}   "
            f"Receipts: {self.receipt_count}"
        )
        for day in sorted(self.purchases):
            lines.append(f"{'─' * 50}")
            try:
                label = date.fromisoformat(day).strftime("%A, %B %d")
            except ValueError:
                label = day
            lines.append(label)
            plist = self.purchases[day]
            if not plist:
                lines.append("  No purchases on this day.")
                continue
            for p in plist:
                marker = "  (refund)" if p.is_refund else ""
                lines.append(
                    f"  {p.merchant:<30} {format_currency(p.total):>10}{marker}"
                )
                for item in p.items:
                    lines.append(
                        f"    {item.item_name:<28} {format_currency(item.item_cost):>10}"
                    )
        return "\n".join(lines)


@dataclass
class MonthSummary:
    month: int
    month_name: str
    total_amount: float = 0.0
    receipt_count: int = 0
    item_count: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> MonthSummary:
        return cls(
            month=int(data["month"]),
            month_name=data.get("monthName", ""),
            total_amount=_amount(data.get("totalAmount")),
            receipt_count=int(data.get("receiptCount", 0) or 0),
            item_count=int(data.get("itemCount", 0) or 0),
        )


@dataclass
class YearlySummary:
    """Per-month rollup for one year."""

    year: int
    summaries: list[MonthSummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> YearlySummary:
        return cls(
            year=int(data["year"]),
            summaries=[MonthSummary.from_dict(s) for s in data.get("summaries") or []],
        )


@dataclass
class DaySummary:
    date: str
    day_name: str
    total_amount: float = 0.0
    receipt_count: int = 0
    item_count: int = 0

    @property
    def day(self) -> int:
        return date.fromisoformat(self.date).day

    @classmethod
    def from_dict(cls, data: dict) -> DaySummary:
        return cls(
            date=data["date"],
            day_name=data.get("dayName", ""),
            total_amount=_amount(data.get("totalAmount")),
            receipt_count=int(data.get("receiptCount", 0) or 0),
            item_count=int(data.get("itemCount", 0) or 0),
        )


@dataclass
class MonthlySummary:
    """Per-day rollup for one month."""

    year: int
    month: int
    daily_summaries: list[DaySummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> MonthlySummary:
        return cls(
            year=int(data["year"]),
            month=int(data["month"]),
            daily_summaries=[
                DaySummary.from_dict(d) for d in data.get("dailySummaries") or []
            ],
        )


def parse_summary(data: dict) -> YearlySummary | MonthlySummary:
    """Pick the rollup type by payload shape."""
    if "dailySummaries" in data:
        return MonthlySummary.from_dict(data)
    return YearlySummary.from_dict(data)


@dataclass
class UserItemStats:
    item_name: str
    short_label: str
    category: str = ""
    total_spent: float = 0.0
    purchase_count: int = 0
    avg_cost: float = 0.0
    last_purchase: str = ""
    monthly_breakdown: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> UserItemStats:
        name = data.get("itemName", "") or ""
        return cls(
            item_name=name,
            short_label=data.get("shortLabel") or name,
            category=data.get("category", "") or "",
            total_spent=_amount(data.get("totalSpent")),
            purchase_count=int(data.get("purchaseCount", 0) or 0),
            avg_cost=_amount(data.get("avgCost")),
            last_purchase=data.get("lastPurchase", "") or "",
            monthly_breakdown={
                k: _amount(v) for k, v in (data.get("monthlyBreakdown") or {}).items()
            },
        )


@dataclass
class UserItemStatsPage:
    """One page of per-item statistics."""

    items: list[UserItemStats] = field(default_factory=list)
    has_more: bool = False
    next_token: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> UserItemStatsPage:
        return cls(
            items=[UserItemStats.from_dict(i) for i in data.get("items") or []],
            has_more=bool(data.get("hasMore", False)),
            next_token=data.get("nextToken") or None,
        )

    @property
    def exhausted(self) -> bool:
        return not self.has_more or self.next_token is None


@dataclass
class TopItem:
    short_label: str
    total_spent: float = 0.0
    purchase_count: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> TopItem:
        return cls(
            short_label=data.get("shortLabel") or data.get("itemName", ""),
            total_spent=_amount(data.get("totalSpent")),
            purchase_count=int(data.get("purchaseCount", 0) or 0),
        )


@dataclass
class UserSummaryStats:
    total_spent: float = 0.0
    total_unique_items: int = 0
    avg_spent_per_item: float = 0.0
    top_items: list[TopItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> UserSummaryStats:
        return cls(
            total_spent=_amount(data.get("totalSpent")),
            total_unique_items=int(data.get("totalUniqueItems", 0) or 0),
            avg_spent_per_item=_amount(data.get("avgSpentPerItem")),
            top_items=[TopItem.from_dict(t) for t in data.get("topItems") or []],
        )


@dataclass
class CategoryStats:
    category: str
    total_spent: float = 0.0
    item_count: int = 0
    avg_spent_per_item: float = 0.0
    top_items: list[TopItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> CategoryStats:
        return cls(
            category=data.get("category", "") or "",
            total_spent=_amount(data.get("totalSpent")),
            item_count=int(data.get("itemCount", 0) or 0),
            avg_spent_per_item=_amount(data.get("avgSpentPerItem")),
            top_items=[TopItem.from_dict(t) for t in data.get("topItems") or []],
        )


@dataclass
class UserCategoryStats:
    total_spent: float = 0.0
    categories: list[CategoryStats] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> UserCategoryStats:
        return cls(
            total_spent=_amount(data.get("totalSpent")),
            categories=[CategoryStats.from_dict(c) for c in data.get("categories") or []],
        )


@dataclass
class GlobalItemStats:
    """Spending on one item across all users."""

    item_name: str
    total_spent: float = 0.0
    total_purchases: int = 0
    avg_cost: float = 0.0
    last_updated: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> GlobalItemStats:
        return cls(
            item_name=data.get("itemName", "") or "",
            total_spent=_amount(data.get("totalSpent")),
            total_purchases=int(data.get("totalPurchases", 0) or 0),
            avg_cost=_amount(data.get("avgCost")),
            last_updated=data.get("lastUpdated", "") or "",
        )


@dataclass
class UploadedItem:
    item_name: str
    item_cost: float = 0.0


@dataclass
class UploadResult:
    """Receipt fields extracted by the backend from an uploaded document.

    ``total_cost`` is not sent by the server; it is the sum of item costs.
    """

    merchant: str = ""
    purchase_date: str = ""
    purchase_time: str = ""
    items: list[UploadedItem] = field(default_factory=list)
    total_items: int | None = None
    processing_time_ms: int | None = None
    total_cost: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> UploadResult:
        raw_items = data.get("items")
        items = [
            UploadedItem(
                item_name=i.get("itemName", "") or "",
                item_cost=_amount(i.get("itemCost")),
            )
            for i in raw_items or []
        ]
        total_cost = None
        if raw_items is not None:
            total_cost = round(sum(i.item_cost for i in items), 2)
        total_items = data.get("totalItems")
        processing = data.get("processingTimeMs")
        return cls(
            merchant=data.get("merchant", "") or "",
            purchase_date=data.get("purchaseDate", "") or "",
            purchase_time=data.get("purchaseTime", "") or "",
            items=items,
            total_items=int(total_items) if total_items is not None else None,
            processing_time_ms=int(processing) if processing is not None else None,
            total_cost=total_cost,
        )
