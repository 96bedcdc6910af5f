"""
Rollout runner.

Purpose
Roll out a list of services one after another and act on each outcome.

The orchestrator only reports. The runner is the caller that reacts:
- success is logged at info
- a failure whose rollback succeeded is logged as a warning
- a failed rollback is logged as an error that needs an operator

Services are never rolled out concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from service_rollout.agent.audit import AuditLogger
from service_rollout.core.types import RolloutRecord
from service_rollout.rollout.base import Service
from service_rollout.rollout.orchestrator import try_service_rollout

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RunnerConfig:
    """
    Runner configuration.

    stop_on_failure
    Stop after the first failed service. Remaining services are skipped.

    audit_path
    When set, every record is appended to this JSON line file.
    """

    stop_on_failure: bool = True
    audit_path: Path | None = None


@dataclass
class RunReport:
    """
    Result of a runner pass.

    records
    One record per attempted service, in order.

    skipped
    Names of services not attempted because an earlier one failed.
    """

    records: list[RolloutRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.records)

    @property
    def rollback_failed(self) -> bool:
        return any(not r.ok and not r.rollback_successful for r in self.records)


class RolloutRunner:
    """Sequential rollout of many services."""

    def __init__(self, config: RunnerConfig | None = None) -> None:
        self._config = config or RunnerConfig()
        self._audit = AuditLogger(self._config.audit_path) if self._config.audit_path else None

    def run_one(self, name: str, service: Service) -> RolloutRecord:
        """Roll out a single service and report the outcome."""

        err = try_service_rollout(service)

        if err is None:
            record = RolloutRecord(name=name, ok=True)
            logger.info("service_rollout_ok", service=name)
        else:
            record = RolloutRecord(
                name=name,
                ok=False,
                stage=err.failed_stage,
                message=str(err),
                rollback_successful=err.rollback_successful,
            )
            if err.requires_intervention:
                logger.error(
                    "service_rollback_failed",
                    service=name,
                    stage=str(err.failed_stage),
                    error=str(err),
                    requires_intervention=True,
                )
            else:
                logger.warning(
                    "service_rolled_back",
                    service=name,
                    stage=str(err.failed_stage),
                    error=str(err),
                )

        if self._audit is not None:
            self._audit.log(record)
        return record

    def run(self, services: list[tuple[str, Service]]) -> RunReport:
        """
        Roll out services in order.

        With stop_on_failure the first failure ends the pass and the
        remaining names are listed as skipped.
        """

        report = RunReport()
        for idx, (name, service) in enumerate(services):
            record = self.run_one(name, service)
            report.records.append(record)

            if not record.ok and self._config.stop_on_failure:
                report.skipped = [n for n, _ in services[idx + 1 :]]
                if report.skipped:
                    logger.warning("rollout_pass_stopped", failed=name, skipped=report.skipped)
                break

        return report
