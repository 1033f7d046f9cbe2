"""Access gate in front of the pages that need a signed-in user."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PROTECTED_PATHS = ("/purchases", "/summary", "/stats")


class GateKind(str, Enum):
    LOADING = "loading"
    SIGN_IN = "sign_in"
    ALLOW = "allow"


@dataclass
class GateDecision:
    kind: GateKind
    return_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.kind is GateKind.ALLOW


def is_protected(path: str, protected: tuple[str, ...] = PROTECTED_PATHS) -> bool:
    path = path.split("?", 1)[0]
    return any(path == p or path.startswith(p + "/") for p in protected)


class AuthGate:
    """Maps the watcher's status to what a page should show.

    A page behind the gate must not fetch anything unless the decision is
    ALLOW. The uploader at ``/`` is public.
    """

    def __init__(self, protected: tuple[str, ...] = PROTECTED_PATHS) -> None:
        self.protected = protected

    def decide(self, status: bool | None, path: str) -> GateDecision:
        if not is_protected(path, self.protected):
            return GateDecision(GateKind.ALLOW)
        match status:
            case None:
                return GateDecision(GateKind.LOADING, return_to=path)
            case False:
                return GateDecision(GateKind.SIGN_IN, return_to=path)
            case _:
                return GateDecision(GateKind.ALLOW)
