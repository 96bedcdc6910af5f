"""
Rollout package.

This makes the rollout folder an explicit package so both Python and mypy
resolve modules consistently.
"""

from service_rollout.rollout.base import Service
from service_rollout.rollout.orchestrator import service_rollout, try_service_rollout

__all__ = ["Service", "service_rollout", "try_service_rollout"]
