"""Weekly purchases page: browsing, inline edits and confirmed deletes."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from ..api import ApiClient
from ..models import WeeklyPurchases, format_currency
from .base import PAGE_ERRORS, PageController, _describe

logger = logging.getLogger(__name__)


class DeleteKind(str, Enum):
    ITEM = "item"
    RECEIPT = "receipt"


@dataclass
class PendingDelete:
    """A delete waiting for the user to confirm it."""

    kind: DeleteKind
    target_id: str
    purchase_date: str
    message: str


def _parse_date(value: str | date | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class PurchasesController(PageController):
    """State for the weekly view.

    Only one row can be in edit mode at a time across the page: starting an
    item edit ends a receipt-date edit and vice versa.

    Edits and deletes are applied to the local copy first. If the server call
    fails the local copy is rolled back and ``alert`` says why. When talking
    to the real backend a successful mutation is followed by a re-fetch; with
    fixtures the local copy is the only record of the change.
    """

    def __init__(self, api: ApiClient, selected_date: str | date | None = None) -> None:
        super().__init__(api)
        self.selected_date: str = (_parse_date(selected_date) or date.today()).isoformat()
        self.data: WeeklyPurchases | None = None

        self.editing_item_id: str | None = None
        self.edit_item_name: str = ""
        self.edit_item_cost: str = ""

        self.editing_receipt_id: str | None = None
        self.new_receipt_date: str = ""

        self.confirming_delete: PendingDelete | None = None

    # --- Fetching ---

    async def load(self) -> WeeklyPurchases | None:
        self.data = None
        result = await self._fetch(lambda: self._api.get_purchases(self.selected_date))
        self.data = result
        return result

    async def set_date(self, value: str | date) -> bool:
        parsed = _parse_date(value)
        if parsed is None:
            self._fail_local(f"Invalid date: {value!r}")
            return False
        self.selected_date = parsed.isoformat()
        await self.load()
        return True

    async def shift_week(self, weeks: int) -> None:
        """Move the selection by whole weeks (the arrow buttons, ±7 days)."""
        current = date.fromisoformat(self.selected_date)
        await self.set_date(current + timedelta(days=7 * weeks))

    # --- Edit mode ---

    def start_item_edit(self, item_id: str) -> bool:
        found = self.data.find_item(item_id) if self.data else None
        if found is None:
            return False
        _, _, item = found
        self.cancel_receipt_date_edit()
        self.editing_item_id = item.item_id
        self.edit_item_name = item.item_name
        self.edit_item_cost = f"{item.item_cost:.2f}"
        return True

    def cancel_item_edit(self) -> None:
        self.editing_item_id = None
        self.edit_item_name = ""
        self.edit_item_cost = ""

    def start_receipt_date_edit(self, receipt_id: str, current_date: str) -> None:
        self.cancel_item_edit()
        self.editing_receipt_id = receipt_id
        self.new_receipt_date = current_date

    def cancel_receipt_date_edit(self) -> None:
        self.editing_receipt_id = None
        self.new_receipt_date = ""

    async def save_item(self) -> bool:
        if not self.editing_item_id or self.data is None:
            return False
        item_id = self.editing_item_id
        name = self.edit_item_name.strip()
        try:
            cost = round(float(self.edit_item_cost), 2)
        except (TypeError, ValueError):
            cost = None
        if not name or cost is None:
            self.alert = "Please enter an item name and a numeric cost."
            return False

        ok = await self._mutate(
            lambda week: week.update_item(item_id, name, cost),
            lambda: self._api.update_item(item_id, name, cost),
        )
        if ok:
            self.cancel_item_edit()
        return ok

    async def save_receipt_date(self) -> bool:
        if not self.editing_receipt_id or self.data is None:
            return False
        receipt_id = self.editing_receipt_id
        new_date = _parse_date(self.new_receipt_date)
        if new_date is None:
            self.alert = "Please pick a valid date."
            return False

        iso = new_date.isoformat()
        ok = await self._mutate(
            lambda week: week.move_receipt(receipt_id, iso),
            lambda: self._api.update_receipt_date(receipt_id, iso),
        )
        if ok:
            self.cancel_receipt_date_edit()
        return ok

    # --- Deletes ---

    def request_delete_item(self, item_id: str) -> bool:
        found = self.data.find_item(item_id) if self.data else None
        if found is None:
            return False
        day, _, item = found
        self.confirming_delete = PendingDelete(
            kind=DeleteKind.ITEM,
            target_id=item_id,
            purchase_date=day,
            message=f"Delete '{item.item_name}' ({format_currency(item.item_cost)})?",
        )
        return True

    def request_delete_receipt(self, receipt_id: str) -> bool:
        found = self.data.find_purchase(receipt_id) if self.data else None
        if found is None:
            return False
        day, purchase = found
        self.confirming_delete = PendingDelete(
            kind=DeleteKind.RECEIPT,
            target_id=receipt_id,
            purchase_date=day,
            message=(
                f"Delete the {purchase.merchant} receipt from {day} "
                f"({format_currency(purchase.total)}) and all its items?"
            ),
        )
        return True

    def cancel_delete(self) -> None:
        self.confirming_delete = None

    async def confirm_delete(self) -> bool:
        pending = self.confirming_delete
        if pending is None:
            return False
        self.confirming_delete = None

        if pending.kind is DeleteKind.ITEM:
            return await self._mutate(
                lambda week: week.remove_item(pending.target_id),
                lambda: self._api.delete_item(pending.target_id),
            )
        return await self._mutate(
            lambda week: week.remove_receipt(pending.target_id),
            lambda: self._api.delete_receipt(pending.target_id, pending.purchase_date),
        )

    async def _mutate(
        self,
        apply: Callable[[WeeklyPurchases], object],
        call: Callable[[], Awaitable[object]],
    ) -> bool:
        if self.data is None:
            return False
        snapshot = self.data.copy()
        apply(self.data)
        try:
            await call()
        except PAGE_ERRORS as e:
            logger.info("Mutation failed, rolling back: %s", e)
            self.data = snapshot
            self.alert = _describe(e)
            return False

        if self._api.live:
            await self.load()
        return True
