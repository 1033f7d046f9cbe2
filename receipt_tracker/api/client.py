"""Typed client for the receipt-tracking backend."""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from ..models import (
    GlobalItemStats,
    MonthlySummary,
    UploadResult,
    UserCategoryStats,
    UserItemStats,
    UserItemStatsPage,
    UserSummaryStats,
    WeeklyPurchases,
    YearlySummary,
    parse_summary,
)
from ..periods import check_period
from .requests import ApiRequest, Operation, UploadFile
from .transport import Transport

logger = logging.getLogger(__name__)


class ApiClient:
    """One method per backend endpoint.

    The transport decides whether calls reach the network or fixtures; the
    client only builds requests and parses responses. Nothing is retried.

    Usage::

        async with ApiClient(create_transport(config, tokens)) as api:
            week = await api.get_purchases("2025-11-01")
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def live(self) -> bool:
        return self._transport.live

    @property
    def transport(self) -> Transport:
        return self._transport

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _send(self, request: ApiRequest) -> Any:
        return await self._transport.send(request)

    # --- Documents ---

    async def upload_document(
        self,
        file: bytes | str | Path,
        doc_type: str,
        filename: str | None = None,
    ) -> UploadResult:
        """Upload a receipt photo (or other document) for extraction.

        Args:
            file: Raw bytes, or a path to read.
            doc_type: Free-form document type, e.g. "receipt".
            filename: Name sent with the upload; defaults to the path's name.

        Raises:
            ValueError: If doc_type is blank.
            ApiError: If the backend rejects the upload.
        """
        if not doc_type or not doc_type.strip():
            raise ValueError("document type must not be empty")

        if isinstance(file, (str, Path)):
            path = Path(file)
            content = path.read_bytes()
            filename = filename or path.name
        else:
            content = file
        filename = filename or "upload"
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        data = await self._send(
            ApiRequest(
                operation=Operation.UPLOAD,
                method="POST",
                path="/upload",
                upload=UploadFile(filename, content, content_type),
                form={"type": doc_type.strip()},
            )
        )
        return UploadResult.from_dict(data)

    # --- Purchases ---

    async def get_purchases(self, date: str) -> WeeklyPurchases:
        data = await self._send(
            ApiRequest(
                operation=Operation.GET_PURCHASES,
                method="GET",
                path="/purchases",
                params={"date": date},
            )
        )
        return WeeklyPurchases.from_dict(data)

    async def get_summary(
        self, year: int, month: int | None = None
    ) -> YearlySummary | MonthlySummary:
        """Yearly rollup by month, or daily rollup when a month is given."""
        data = await self._send(
            ApiRequest(
                operation=Operation.GET_SUMMARY,
                method="GET",
                path="/purchases/summary",
                params={"year": year, "month": month or None},
            )
        )
        return parse_summary(data)

    async def update_item(self, item_id: str, item_name: str, item_cost: float) -> dict:
        return await self._send(
            ApiRequest(
                operation=Operation.UPDATE_ITEM,
                method="PUT",
                path="/items",
                json={"itemId": item_id, "itemName": item_name, "itemCost": item_cost},
            )
        )

    async def delete_item(self, item_id: str) -> dict:
        return await self._send(
            ApiRequest(
                operation=Operation.DELETE_ITEM,
                method="DELETE",
                path="/items",
                json={"itemId": item_id},
            )
        )

    async def update_receipt_date(self, receipt_id: str, new_date: str) -> dict:
        return await self._send(
            ApiRequest(
                operation=Operation.UPDATE_RECEIPT_DATE,
                method="PUT",
                path=f"/receipts/{receipt_id}/date",
                json={"newDate": new_date},
            )
        )

    async def delete_receipt(
        self, receipt_id: str, purchase_date: str | None = None
    ) -> dict:
        return await self._send(
            ApiRequest(
                operation=Operation.DELETE_RECEIPT,
                method="DELETE",
                path=f"/receipts/{receipt_id}",
                json={"purchaseDate": purchase_date} if purchase_date else None,
            )
        )

    # --- Statistics ---

    async def get_user_item_stats(
        self,
        limit: int = 20,
        next_token: str | None = None,
        period: str | None = None,
        category: str | None = None,
    ) -> UserItemStatsPage:
        """Fetch one page of per-item statistics.

        ``next_token`` must be passed back exactly as the previous page
        returned it.
        """
        data = await self._send(
            ApiRequest(
                operation=Operation.GET_USER_ITEM_STATS,
                method="GET",
                path="/user-stats/items",
                params={
                    "limit": limit,
                    "nextToken": next_token,
                    "period": check_period(period),
                    "category": category or None,
                },
            )
        )
        return UserItemStatsPage.from_dict(data)

    async def iter_user_item_stats(
        self,
        limit: int = 20,
        period: str | None = None,
        category: str | None = None,
    ) -> AsyncIterator[UserItemStats]:
        """Yield every item across pages, following nextToken until exhausted."""
        token: str | None = None
        while True:
            page = await self.get_user_item_stats(limit, token, period, category)
            for item in page.items:
                yield item
            if page.exhausted:
                return
            if page.next_token == token:
                logger.warning("Backend repeated nextToken %r; stopping", token)
                return
            token = page.next_token

    async def get_user_summary_stats(self, period: str | None = None) -> UserSummaryStats:
        data = await self._send(
            ApiRequest(
                operation=Operation.GET_USER_SUMMARY_STATS,
                method="GET",
                path="/user-stats/summary",
                params={"period": check_period(period)},
            )
        )
        return UserSummaryStats.from_dict(data)

    async def get_user_category_stats(
        self, period: str | None = None
    ) -> UserCategoryStats:
        data = await self._send(
            ApiRequest(
                operation=Operation.GET_USER_CATEGORY_STATS,
                method="GET",
                path="/user-stats/categories",
                params={"period": check_period(period)},
            )
        )
        return UserCategoryStats.from_dict(data)

    async def get_global_item_stats(self, item_name: str) -> GlobalItemStats:
        data = await self._send(
            ApiRequest(
                operation=Operation.GET_GLOBAL_ITEM_STATS,
                method="GET",
                path="/item-stats",
                params={"itemName": item_name},
            )
        )
        return GlobalItemStats.from_dict(data)
