"""Offline transport that answers from canned fixtures."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from . import fixture_data
from .errors import ApiError
from .requests import ApiRequest, Operation
from .transport import Transport

logger = logging.getLogger(__name__)

_TOKEN_PREFIX = "mock-page-"


class FixtureTransport(Transport):
    """Serves every operation from static data after an artificial delay.

    Mutations are accepted and logged but change nothing: the fixtures are
    the same on every read. Every request served is kept in ``requests``.
    """

    live = False

    def __init__(self, delay: float = 0.5) -> None:
        self._delay = delay
        self.requests: list[ApiRequest] = []

    def count(self, operation: Operation) -> int:
        return sum(1 for r in self.requests if r.operation is operation)

    async def send(self, request: ApiRequest) -> Any:
        self.requests.append(request)
        if self._delay > 0:
            await asyncio.sleep(self._delay)

        op = request.operation
        if op.mutating:
            logger.info("Mock: %s %s", op.value, request.json or request.path)
            return {}

        match op:
            case Operation.UPLOAD:
                return copy.deepcopy(fixture_data.UPLOAD_RESULT)
            case Operation.GET_PURCHASES:
                return copy.deepcopy(fixture_data.WEEKLY_PURCHASES)
            case Operation.GET_SUMMARY:
                if request.query.get("month") is not None:
                    return copy.deepcopy(fixture_data.MONTHLY_SUMMARY)
                return copy.deepcopy(fixture_data.YEARLY_SUMMARY)
            case Operation.GET_USER_ITEM_STATS:
                return self._item_stats_page(request.query)
            case Operation.GET_USER_SUMMARY_STATS:
                return copy.deepcopy(fixture_data.SUMMARY_STATS)
            case Operation.GET_USER_CATEGORY_STATS:
                return copy.deepcopy(fixture_data.CATEGORY_STATS)
            case Operation.GET_GLOBAL_ITEM_STATS:
                name = str(request.query.get("itemName", "")).strip().lower()
                found = fixture_data.GLOBAL_ITEM_STATS.get(name)
                if found is None:
                    raise ApiError(404, f"Item {name!r} not found")
                return copy.deepcopy(found)
            case _:
                raise ApiError(404, f"no fixture for {op.value}")

    @staticmethod
    def _item_stats_page(query: dict) -> dict:
        items = fixture_data.ITEM_STATS
        category = query.get("category")
        if category:
            items = [i for i in items if i["category"].lower() == str(category).lower()]

        limit = int(query.get("limit", 20))
        token = query.get("nextToken")
        offset = 0
        if token is not None:
            if not str(token).startswith(_TOKEN_PREFIX):
                raise ApiError(400, f"invalid nextToken {token!r}")
            offset = int(str(token)[len(_TOKEN_PREFIX):])

        page = items[offset:offset + limit]
        end = offset + len(page)
        has_more = end < len(items)
        result: dict[str, Any] = {"items": copy.deepcopy(page), "hasMore": has_more}
        if has_more:
            result["nextToken"] = f"{_TOKEN_PREFIX}{end}"
        return result
