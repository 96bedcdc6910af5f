"""
Callback service.

Build a service from plain callables when the deployment logic already
exists as functions, for example a deploy helper and a smoke test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


def _noop() -> None:
    return None


@dataclass(frozen=True)
class CallbackService:
    """Service whose three operations delegate to zero argument callables."""

    name: str
    rollout_fn: Callable[[], object]
    check_health_fn: Callable[[], object] = _noop
    rollback_fn: Callable[[], object] = _noop

    def rollout(self) -> None:
        self.rollout_fn()

    def check_health(self) -> None:
        self.check_health_fn()

    def rollback(self) -> None:
        self.rollback_fn()
