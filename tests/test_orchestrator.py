from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from service_rollout import ServiceRolloutError, service_rollout, try_service_rollout
from service_rollout.core.types import RolloutStage
from service_rollout.services.callback import CallbackService
from service_rollout.services.mock import InMemoryService


def make_errors() -> tuple[RuntimeError, RuntimeError, RuntimeError]:
    return (
        RuntimeError("rollout failed"),
        RuntimeError("check health failed"),
        RuntimeError("rollback failed"),
    )


def test_happy_path_returns_none_without_rollback():
    svc = InMemoryService()

    assert service_rollout(svc) is None
    assert svc.calls == [RolloutStage.rollout, RolloutStage.check_health]
    assert svc.current == "v2"


def test_broken_rollout_is_rolled_back_and_health_never_checked():
    rollout_err, _, _ = make_errors()
    svc = InMemoryService(fail_rollout=rollout_err)

    with pytest.raises(ServiceRolloutError) as excinfo:
        service_rollout(svc)

    err = excinfo.value
    assert err.rollout_error is rollout_err
    assert err.rollback_successful
    assert err.check_health_error is None
    assert err.rollback_error is None
    assert svc.call_count(RolloutStage.check_health) == 0
    assert svc.calls == [RolloutStage.rollout, RolloutStage.rollback]
    assert svc.current == "v1"
    assert err.matches(rollout_err)


def test_broken_health_check_is_rolled_back():
    _, check_health_err, _ = make_errors()
    svc = InMemoryService(fail_check_health=check_health_err)

    with pytest.raises(ServiceRolloutError) as excinfo:
        service_rollout(svc)

    err = excinfo.value
    assert err.check_health_error is check_health_err
    assert err.rollback_successful
    assert err.rollout_error is None
    assert err.rollback_error is None
    assert svc.current == "v1"
    assert str(err) == "rollback successful: failed health check: check health failed"


def test_broken_rollback_alone_is_never_reached():
    _, _, rollback_err = make_errors()
    svc = InMemoryService(fail_rollback=rollback_err)

    service_rollout(svc)

    assert svc.call_count(RolloutStage.rollback) == 0


def test_broken_rollout_and_rollback():
    rollout_err, _, rollback_err = make_errors()
    svc = InMemoryService(fail_rollout=rollout_err, fail_rollback=rollback_err)

    with pytest.raises(ServiceRolloutError) as excinfo:
        service_rollout(svc)

    err = excinfo.value
    assert err.rollout_error is rollout_err
    assert err.rollback_error is rollback_err
    assert not err.rollback_successful
    assert err.matches(rollout_err)
    assert err.matches(rollback_err)
    assert not err.matches(RuntimeError("unrelated"))
    assert str(err) == "failed rollout: rollout failed: failed rollback: rollback failed"


def test_broken_health_check_and_rollback():
    _, check_health_err, rollback_err = make_errors()
    svc = InMemoryService(fail_check_health=check_health_err, fail_rollback=rollback_err)

    with pytest.raises(ServiceRolloutError) as excinfo:
        service_rollout(svc)

    err = excinfo.value
    assert str(err) == "failed health check: check health failed: failed rollback: rollback failed"
    assert err.matches(check_health_err)
    assert err.matches(rollback_err)
    assert not err.matches(RuntimeError("unrelated"))
    assert err.requires_intervention


def test_everything_broken_stops_after_rollout():
    rollout_err, check_health_err, rollback_err = make_errors()
    svc = InMemoryService(
        fail_rollout=rollout_err,
        fail_check_health=check_health_err,
        fail_rollback=rollback_err,
    )

    with pytest.raises(ServiceRolloutError) as excinfo:
        service_rollout(svc)

    err = excinfo.value
    assert err.matches(rollout_err)
    assert err.matches(rollback_err)
    assert not err.matches(check_health_err)
    assert svc.call_count(RolloutStage.check_health) == 0


def test_composite_is_chained_from_primary_failure():
    svc = InMemoryService(fail_check_health=True)

    with pytest.raises(ServiceRolloutError) as excinfo:
        service_rollout(svc)

    assert excinfo.value.__cause__ is excinfo.value.check_health_error


def test_try_service_rollout_returns_value():
    assert try_service_rollout(InMemoryService()) is None

    err = try_service_rollout(InMemoryService(fail_rollout=True))
    assert isinstance(err, ServiceRolloutError)
    assert err.failed_stage == RolloutStage.rollout
    assert str(err) == "rollback successful: failed rollout: rollout failed"


def test_keyboard_interrupt_is_not_treated_as_failure():
    rolled_back: list[bool] = []

    def interrupt() -> None:
        raise KeyboardInterrupt

    svc = CallbackService(
        name="interrupted",
        rollout_fn=interrupt,
        rollback_fn=lambda: rolled_back.append(True),
    )

    with pytest.raises(KeyboardInterrupt):
        service_rollout(svc)
    assert rolled_back == []


def test_independent_services_can_roll_out_concurrently():
    services = [InMemoryService(name=f"svc{i}", fail_check_health=i % 2 == 1) for i in range(8)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(try_service_rollout, services))

    for i, (svc, err) in enumerate(zip(services, results)):
        if i % 2:
            assert err is not None
            assert svc.current == "v1"
        else:
            assert err is None
            assert svc.current == "v2"
