"""
Static service source.

Reads a local json file containing either:
1) a single service object
2) or a list of service objects under "services"

Schema example
{
  "services": [
    {
      "name": "api",
      "rollout": "./deploy.sh api v2",
      "check_health": "",
      "health_url": "http://127.0.0.1:8080/healthz",
      "rollback": "./deploy.sh api v1",
      "cwd": "/srv/deploy",
      "env": {"REGION": "eu-west-1"},
      "timeout_seconds": 120
    }
  ]
}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from service_rollout.core.errors import ServiceConfigInvalid
from service_rollout.core.types import ServiceSpec

_COMMAND_FIELDS = ("rollout", "check_health", "rollback", "health_url")


def _spec_from_dict(obj: dict[str, Any], idx: int) -> ServiceSpec:
    """Convert a dict into ServiceSpec."""
    name = obj.get("name")
    if not isinstance(name, str) or not name:
        raise ServiceConfigInvalid(f"service at index {idx} has no name")

    commands: dict[str, str] = {}
    for key in _COMMAND_FIELDS:
        value = obj.get(key, "") or ""
        if not isinstance(value, str):
            raise ServiceConfigInvalid(f"service {name}: {key} must be a string")
        commands[key] = value

    env_raw = obj.get("env", {}) or {}
    if not isinstance(env_raw, dict):
        raise ServiceConfigInvalid(f"service {name}: env must be an object")

    cwd = obj.get("cwd")
    if cwd is not None and not isinstance(cwd, str):
        raise ServiceConfigInvalid(f"service {name}: cwd must be a string")

    timeout_raw = obj.get("timeout_seconds", 300)
    try:
        timeout = float(timeout_raw)
    except (TypeError, ValueError) as exc:
        raise ServiceConfigInvalid(f"service {name}: timeout_seconds must be a number") from exc
    if timeout <= 0:
        raise ServiceConfigInvalid(f"service {name}: timeout_seconds must be positive")

    return ServiceSpec(
        name=name,
        cwd=cwd,
        env={str(k): str(v) for k, v in env_raw.items()},
        timeout_seconds=timeout,
        **commands,
    )


@dataclass(frozen=True)
class StaticServiceSource:
    """Load service definitions from a local json file."""

    path: Path

    def fetch(self) -> list[ServiceSpec]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ServiceConfigInvalid(f"cannot read {self.path}: {exc}") from exc

        if isinstance(data, dict) and "services" in data:
            raw = data.get("services", [])
            if not isinstance(raw, list):
                raise ServiceConfigInvalid("services must be a list")
            items = raw
        elif isinstance(data, dict):
            items = [data]
        else:
            raise ServiceConfigInvalid("expected a service object or a services list")

        specs: list[ServiceSpec] = []
        seen: set[str] = set()
        for idx, item in enumerate(items):
            if not isinstance(item, dict):
                raise ServiceConfigInvalid(f"service at index {idx} is not an object")
            spec = _spec_from_dict(item, idx)
            if spec.name in seen:
                raise ServiceConfigInvalid(f"duplicate service name {spec.name}")
            seen.add(spec.name)
            specs.append(spec)
        return specs
