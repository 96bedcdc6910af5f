"""
Command service.

This service runs the shell commands of a ServiceSpec.

Behavior
rollout and rollback run their command and raise CommandFailed on a non zero
exit or a timeout.
check_health runs its command when one is configured, then probes health_url
when one is configured. Either failing raises.

Timeouts
The orchestrator never times out. Each command and probe is bounded here by
ServiceSpec.timeout_seconds.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import structlog

from service_rollout.core.errors import CommandFailed, HealthCheckFailed
from service_rollout.core.types import ServiceSpec

logger = structlog.get_logger(__name__)


def _partial_output(stream: str | bytes | None) -> str:
    """Output captured before a timeout may be bytes even in text mode."""
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode(errors="replace")
    return stream


@dataclass(frozen=True)
class CommandService:
    """
    Shell command based service.

    spec
    The service definition, usually loaded by StaticServiceSource.
    """

    spec: ServiceSpec

    @property
    def name(self) -> str:
        return self.spec.name

    def rollout(self) -> None:
        self._run(self.spec.rollout)

    def check_health(self) -> None:
        self._run(self.spec.check_health)
        if self.spec.health_url:
            self._probe(self.spec.health_url)

    def rollback(self) -> None:
        self._run(self.spec.rollback)

    def _run(self, command: str) -> None:
        if not command:
            return

        env = dict(os.environ)
        env.update(self.spec.env)

        logger.debug("command_started", service=self.name, command=command)
        try:
            proc = subprocess.run(
                command,
                shell=True,
                cwd=self.spec.cwd,
                env=env,
                capture_output=True,
                text=True,
                timeout=self.spec.timeout_seconds,
            )
        except subprocess.TimeoutExpired as exc:
            output = _partial_output(exc.stdout) + _partial_output(exc.stderr)
            raise CommandFailed(command=command, returncode=None, output=output) from exc

        if proc.returncode != 0:
            raise CommandFailed(
                command=command,
                returncode=proc.returncode,
                output=(proc.stdout or "") + (proc.stderr or ""),
            )

    def _probe(self, url: str) -> None:
        req = Request(url=url, method="GET")
        try:
            with urlopen(req, timeout=self.spec.timeout_seconds) as resp:
                status = int(resp.status)
        except HTTPError as exc:
            raise HealthCheckFailed(url=url, status=exc.code) from exc
        except (URLError, OSError) as exc:
            raise HealthCheckFailed(url=url, status=None, reason=str(exc)) from exc

        if not 200 <= status < 300:
            raise HealthCheckFailed(url=url, status=status)
        logger.debug("health_probe_ok", service=self.name, url=url, status=status)
