"""
Error taxonomy.

We separate error types so callers can react correctly.
Example:
ServiceRolloutError with rollback_successful should warn, the service is back
on its previous version.
ServiceRolloutError with a rollback_error should page an operator, the service
is in an unknown state.
ServiceConfigInvalid should stop before any service is touched.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass
from typing import Any

from service_rollout.core.types import RolloutStage


class RolloutError(Exception):
    """Base class for all rollout exceptions."""


class _FieldError(RolloutError):
    """
    Base for dataclass exceptions with read only fields.

    Only the dataclass fields are locked once set. Attributes the runtime
    writes later, such as __traceback__ and __notes__, stay writable.
    Pickling rebuilds the exception from its fields.
    """

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__dataclass_fields__ and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if name in self.__dataclass_fields__:
            raise FrozenInstanceError(f"cannot delete field {name!r}")
        super().__delattr__(name)

    def __reduce__(self) -> tuple[Any, ...]:
        names = self.__dataclass_fields__
        args = tuple(getattr(self, name) for name in names)
        state = {k: v for k, v in self.__dict__.items() if k not in names}
        return (type(self), args, state or None)


@dataclass(eq=False)
class ServiceRolloutError(_FieldError):
    """
    Composite failure of a single service rollout.

    rollout_error
    Raised by Service.rollout. When set, check_health was never called.

    check_health_error
    Raised by Service.check_health after a successful rollout.

    rollback_error
    Raised by Service.rollback. Only set when rollback was attempted and failed.

    rollback_successful
    True when rollback was attempted and completed.

    The orchestrator sets at most one of rollout_error and check_health_error,
    and exactly one of rollback_error and rollback_successful.
    """

    rollout_error: BaseException | None = None
    check_health_error: BaseException | None = None
    rollback_error: BaseException | None = None
    rollback_successful: bool = False

    def __str__(self) -> str:
        msg = ""

        if self.rollout_error is not None:
            msg = "failed rollout: " + str(self.rollout_error)

        if self.check_health_error is not None:
            msg += "failed health check: " + str(self.check_health_error)

        if self.rollback_error is not None:
            msg += ": failed rollback: " + str(self.rollback_error)

        if self.rollback_successful:
            return "rollback successful: " + msg
        return msg

    @property
    def causes(self) -> tuple[BaseException, ...]:
        """Underlying errors in rollout, check health, rollback order."""
        found = (self.rollout_error, self.check_health_error, self.rollback_error)
        return tuple(err for err in found if err is not None)

    @property
    def failed_stage(self) -> RolloutStage | None:
        """Stage of the primary failure, or None for an empty result."""
        if self.rollout_error is not None:
            return RolloutStage.rollout
        if self.check_health_error is not None:
            return RolloutStage.check_health
        return None

    @property
    def requires_intervention(self) -> bool:
        return self.rollback_error is not None

    def matches(self, candidate: BaseException | type[BaseException] | None) -> bool:
        """
        Report whether candidate is one of the underlying causes.

        Instances match by identity, either directly or through the
        candidate's __cause__ and __context__ chain.
        Classes match when any cause is an instance of them.
        None never matches, even when no cause is set.
        """
        if candidate is None:
            return False

        for cause in self.causes:
            if isinstance(candidate, type):
                if isinstance(cause, candidate):
                    return True
            elif any(link is cause for link in _error_chain(candidate)):
                return True

            if isinstance(cause, ServiceRolloutError) and cause.matches(candidate):
                return True

        return False


def _error_chain(err: BaseException) -> list[BaseException]:
    """Walk __cause__ and __context__ links, guarding against cycles."""
    chain: list[BaseException] = []
    current: BaseException | None = err
    while current is not None and not any(current is seen for seen in chain):
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


@dataclass(eq=False)
class CommandFailed(_FieldError):
    """Raised when a service shell command exits non zero or times out."""

    command: str
    returncode: int | None
    output: str = ""

    def __str__(self) -> str:
        if self.returncode is None:
            return f"command timed out: {self.command}"
        return f"command exited {self.returncode}: {self.command}"


@dataclass(eq=False)
class HealthCheckFailed(_FieldError):
    """Raised when an HTTP health probe does not answer with a 2xx status."""

    url: str
    status: int | None
    reason: str = ""

    def __str__(self) -> str:
        if self.status is None:
            return f"health probe {self.url} unreachable: {self.reason}"
        return f"health probe {self.url} returned {self.status}"


class ServiceConfigInvalid(RolloutError):
    """Raised when a service definition file is malformed."""
