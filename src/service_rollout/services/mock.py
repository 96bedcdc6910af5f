"""
In memory service.

This service is used for tests and local simulations.
It behaves like a single deployment slot holding a current and a previous
version.

Features
- Records every operation call in order
- Fails any operation on demand, with a default or a caller supplied error
- Rollback restores the version that was live before rollout
"""

from __future__ import annotations

from dataclasses import dataclass, field

from service_rollout.core.types import RolloutStage


@dataclass
class InMemoryService:
    """
    In memory service.

    fail_rollout, fail_check_health, fail_rollback
    Either a bool or an exception instance. True raises a RuntimeError with a
    fixed message, an exception instance is raised as is.

    current and target
    Live version and the version rollout installs.

    calls
    Operation names in call order, used as a spy by tests.
    """

    name: str = "in-memory"
    target: str = "v2"
    current: str = "v1"
    fail_rollout: bool | Exception = False
    fail_check_health: bool | Exception = False
    fail_rollback: bool | Exception = False
    calls: list[RolloutStage] = field(default_factory=list)
    previous: str | None = None

    def rollout(self) -> None:
        self.calls.append(RolloutStage.rollout)
        self._maybe_fail(self.fail_rollout, "rollout failed")
        self.previous = self.current
        self.current = self.target

    def check_health(self) -> None:
        self.calls.append(RolloutStage.check_health)
        self._maybe_fail(self.fail_check_health, "check health failed")

    def rollback(self) -> None:
        self.calls.append(RolloutStage.rollback)
        self._maybe_fail(self.fail_rollback, "rollback failed")
        if self.previous is not None:
            self.current = self.previous
            self.previous = None

    def call_count(self, stage: RolloutStage) -> int:
        return self.calls.count(stage)

    @staticmethod
    def _maybe_fail(setting: bool | Exception, message: str) -> None:
        if isinstance(setting, Exception):
            raise setting
        if setting:
            raise RuntimeError(message)
