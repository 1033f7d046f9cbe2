"""Structured description of a backend call."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Operation(str, Enum):
    UPLOAD = "upload"
    GET_PURCHASES = "get_purchases"
    GET_SUMMARY = "get_summary"
    UPDATE_ITEM = "update_item"
    DELETE_ITEM = "delete_item"
    UPDATE_RECEIPT_DATE = "update_receipt_date"
    DELETE_RECEIPT = "delete_receipt"
    GET_USER_ITEM_STATS = "get_user_item_stats"
    GET_USER_SUMMARY_STATS = "get_user_summary_stats"
    GET_USER_CATEGORY_STATS = "get_user_category_stats"
    GET_GLOBAL_ITEM_STATS = "get_global_item_stats"

    @property
    def mutating(self) -> bool:
        return self in _MUTATIONS


_MUTATIONS = {
    Operation.UPDATE_ITEM,
    Operation.DELETE_ITEM,
    Operation.UPDATE_RECEIPT_DATE,
    Operation.DELETE_RECEIPT,
}


@dataclass
class UploadFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass
class ApiRequest:
    """One call to the backend.

    ``path`` is relative to the API base URL. ``params`` with a None value
    are left out of the query string.
    """

    operation: Operation
    method: str
    path: str
    params: dict[str, Any] = field(default_factory=dict)
    json: dict[str, Any] | None = None
    upload: UploadFile | None = None
    form: dict[str, str] = field(default_factory=dict)

    @property
    def query(self) -> dict[str, Any]:
        return {k: v for k, v in self.params.items() if v is not None}
