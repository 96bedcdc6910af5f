from __future__ import annotations

import json
from pathlib import Path

import pytest

from service_rollout.core.errors import ServiceConfigInvalid
from service_rollout.sources.static import StaticServiceSource


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_static_source_loads_service_list(tmp_path: Path):
    path = _write(
        tmp_path / "services.json",
        {
            "services": [
                {
                    "name": "api",
                    "rollout": "deploy api",
                    "rollback": "deploy api --previous",
                    "health_url": "http://127.0.0.1:8080/healthz",
                    "env": {"REPLICAS": 3},
                    "timeout_seconds": 60,
                },
                {"name": "worker", "rollout": "deploy worker"},
            ]
        },
    )

    specs = StaticServiceSource(path=path).fetch()

    assert [s.name for s in specs] == ["api", "worker"]
    assert specs[0].env == {"REPLICAS": "3"}
    assert specs[0].timeout_seconds == 60.0
    assert specs[1].check_health == ""
    assert specs[1].timeout_seconds == 300.0


def test_static_source_accepts_single_object(tmp_path: Path):
    path = _write(tmp_path / "service.json", {"name": "api", "rollout": "deploy api"})

    specs = StaticServiceSource(path=path).fetch()

    assert len(specs) == 1
    assert specs[0].rollout == "deploy api"


@pytest.mark.parametrize(
    "payload",
    [
        {"services": [{"rollout": "deploy"}]},
        {"services": [{"name": "api"}, {"name": "api"}]},
        {"services": [{"name": "api", "env": ["A=1"]}]},
        {"services": [{"name": "api", "rollout": 5}]},
        {"services": [{"name": "api", "timeout_seconds": "soon"}]},
        {"services": [{"name": "api", "timeout_seconds": 0}]},
        {"services": "api"},
        ["api"],
    ],
)
def test_static_source_rejects_malformed_definitions(tmp_path: Path, payload: object):
    path = _write(tmp_path / "services.json", payload)

    with pytest.raises(ServiceConfigInvalid):
        StaticServiceSource(path=path).fetch()


def test_static_source_rejects_unreadable_file(tmp_path: Path):
    bad = tmp_path / "services.json"
    bad.write_text("{not json", encoding="utf-8")

    with pytest.raises(ServiceConfigInvalid):
        StaticServiceSource(path=bad).fetch()

    with pytest.raises(ServiceConfigInvalid):
        StaticServiceSource(path=tmp_path / "missing.json").fetch()
