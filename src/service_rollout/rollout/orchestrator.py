"""
Rollout orchestrator.

This module drives one service through the fixed sequence:
rollout, check health, and rollback when either of the first two raises.

Safety
Rollback is always attempted after a primary failure.
Every failure is surfaced in a ServiceRolloutError. Nothing is retried.

Concurrency
The orchestrator keeps no state between calls. Independent services can be
rolled out from separate threads, one call per service.
"""

from __future__ import annotations

import structlog

from service_rollout.core.errors import ServiceRolloutError
from service_rollout.core.types import RolloutStage
from service_rollout.rollout.base import Service

logger = structlog.get_logger(__name__)


def _service_name(service: Service) -> str:
    name = getattr(service, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(service).__name__


def _rollback_after(
    service: Service,
    stage: RolloutStage,
    primary: Exception,
    name: str,
) -> ServiceRolloutError:
    """Attempt rollback and build the composite error for a primary failure."""
    primary_field = "rollout_error" if stage == RolloutStage.rollout else "check_health_error"

    logger.info("rollback_started", service=name, failed_stage=str(stage))
    try:
        service.rollback()
    except Exception as rollback_exc:
        logger.debug("rollback_failed", service=name, error=str(rollback_exc))
        return ServiceRolloutError(**{primary_field: primary}, rollback_error=rollback_exc)

    logger.debug("rollback_completed", service=name)
    return ServiceRolloutError(**{primary_field: primary}, rollback_successful=True)


def service_rollout(service: Service) -> None:
    """
    Roll out a single service.

    Steps
    1) rollout, on failure rollback and raise
    2) check health, on failure rollback and raise
    3) return None

    Raises ServiceRolloutError, chained from the primary failure.
    Only Exception subclasses count as service failures.
    """

    name = _service_name(service)

    logger.info("rollout_started", service=name)
    try:
        service.rollout()
    except Exception as exc:
        logger.debug("rollout_failed", service=name, error=str(exc))
        raise _rollback_after(service, RolloutStage.rollout, exc, name) from exc

    logger.debug("check_health_started", service=name)
    try:
        service.check_health()
    except Exception as exc:
        logger.debug("check_health_failed", service=name, error=str(exc))
        raise _rollback_after(service, RolloutStage.check_health, exc, name) from exc

    logger.info("rollout_completed", service=name)


def try_service_rollout(service: Service) -> ServiceRolloutError | None:
    """
    Value returning form of service_rollout.

    Returns None on success and the composite error on failure.
    """
    try:
        service_rollout(service)
    except ServiceRolloutError as err:
        return err
    return None
