"""
Service interface.

Goal
Define the one contract the orchestrator depends on, without binding it to
any deployment tool.

Design notes
Each operation signals failure by raising. Returning normally means success.
The orchestrator calls each operation at most once per run and never assumes
an operation is idempotent or safe to retry.
"""

from __future__ import annotations

from typing import Protocol


class Service(Protocol):
    """
    Deployable unit.

    rollout
    Performs the deployment action.

    check_health
    Verifies the deployed state. Only called after a successful rollout.

    rollback
    Restores the previous known good state. Only called after rollout or
    check_health raised.
    """

    def rollout(self) -> None:
        """Deploy the new version."""

    def check_health(self) -> None:
        """Raise when the deployed version is unhealthy or cannot be verified."""

    def rollback(self) -> None:
        """Restore the previous version."""
