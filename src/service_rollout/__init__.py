"""
service_rollout

A common way of safely rolling out generic applications.

Any object with rollout, check_health, and rollback methods is a Service.
service_rollout drives it through rollout, health check, and rollback on
failure, and raises a ServiceRolloutError describing what failed and whether
the rollback recovered.

Modules:
core holds shared types and the error taxonomy
rollout holds the Service protocol and the orchestrator
services holds pre-defined flows for common patterns
sources loads service definitions from files
agent runs many services in sequence and audits outcomes
"""

from service_rollout.core.errors import RolloutError, ServiceRolloutError
from service_rollout.rollout.base import Service
from service_rollout.rollout.orchestrator import service_rollout, try_service_rollout

__all__ = [
    "RolloutError",
    "Service",
    "ServiceRolloutError",
    "service_rollout",
    "try_service_rollout",
]
