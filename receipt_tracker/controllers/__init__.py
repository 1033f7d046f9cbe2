"""View state for each page of the tracker."""

from .base import PAGE_ERRORS, LoadState, PageController
from .gate import PROTECTED_PATHS, AuthGate, GateDecision, GateKind, is_protected
from .purchases import DeleteKind, PendingDelete, PurchasesController
from .stats import StatsController, StatsTab
from .summary import DayCell, MonthCell, SummaryController
from .uploader import DOC_TYPES, UploaderController

__all__ = [
    "PAGE_ERRORS",
    "LoadState",
    "PageController",
    "AuthGate",
    "GateDecision",
    "GateKind",
    "PROTECTED_PATHS",
    "is_protected",
    "UploaderController",
    "DOC_TYPES",
    "PurchasesController",
    "DeleteKind",
    "PendingDelete",
    "SummaryController",
    "MonthCell",
    "DayCell",
    "StatsController",
    "StatsTab",
]
