"""
Core types.

This file defines the shared data structures used across the package.

Important design choice
The orchestrator only knows the Service protocol.
ServiceSpec is a description of a command driven service and is only used by
the pre-defined flows, the static source, and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class RolloutStage(StrEnum):
    """
    Stages of a single rollout run.

    rollout
      Service.rollout is being applied.

    check_health
      Rollout completed, the deployed state is being verified.

    rollback
      A primary failure happened and the previous state is being restored.
    """

    rollout = "rollout"
    check_health = "check_health"
    rollback = "rollback"


@dataclass(frozen=True)
class ServiceSpec:
    """
    Command driven service definition.

    rollout, check_health, rollback
    Shell commands. An empty command makes that step a no op.

    health_url
    Optional HTTP endpoint probed during check_health.

    cwd and env
    Working directory and extra environment for every command.

    timeout_seconds
    Per command and per probe limit. The orchestrator itself never times out.
    """

    name: str
    rollout: str = ""
    check_health: str = ""
    rollback: str = ""
    health_url: str = ""
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout_seconds: float = 300.0


@dataclass(frozen=True)
class RolloutRecord:
    """
    Outcome of one service rollout, suitable for reports and audit logs.

    stage is the failed stage, or None when the rollout succeeded.
    message is the rendered composite error, empty on success.
    """

    name: str
    ok: bool
    stage: RolloutStage | None = None
    message: str = ""
    rollback_successful: bool = False
