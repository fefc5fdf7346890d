# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the readiness wait protocol."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from galera_sidecar.kernel.exceptions import (
    ProcessNotRunningException,
    ReadinessRejectedException,
    ReadinessTimeoutException,
    StatusQueryFailedException,
    SupervisorException,
    WaitCancelledException,
)
from galera_sidecar.lifecycle.readiness_wait import ReadinessWaiter
from galera_sidecar.readiness.ports import ProbeResult
from galera_sidecar.supervisor.ports import ServiceStatus
from galera_sidecar.testing import UNREACHABLE, FakeReadinessProbe, FakeSupervisorClient

RUNNING = ServiceStatus.RUNNING
NO_DELAY = timedelta(0)


def _waiter(supervisor, probe, **kwargs) -> ReadinessWaiter:
    kwargs.setdefault("tick_interval", NO_DELAY)
    return ReadinessWaiter(supervisor, probe, **kwargs)


class HangingProbe:
    """Probe that never answers until cancelled."""

    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.cancelled = False

    async def probe(self) -> ProbeResult:
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        raise AssertionError("unreachable")


# ---------------------------------------------------------------------------
# Success paths
# ---------------------------------------------------------------------------


class TestReadinessSuccess:
    @pytest.mark.asyncio
    async def test_ready_on_first_tick(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        probe = FakeReadinessProbe([200])

        ticks = await _waiter(supervisor, probe).wait("mysql")

        assert ticks == 1
        assert supervisor.status_calls == ["mysql"]
        assert probe.probe_count == 1

    @pytest.mark.parametrize("unreachable_ticks", [1, 2, 5])
    @pytest.mark.asyncio
    async def test_unreachable_endpoint_is_retried_until_ready(self, unreachable_ticks: int) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        probe = FakeReadinessProbe([UNREACHABLE] * unreachable_ticks + [200])

        ticks = await _waiter(supervisor, probe).wait("mysql")

        assert ticks == unreachable_ticks + 1
        assert len(supervisor.status_calls) == unreachable_ticks + 1
        assert probe.probe_count == unreachable_ticks + 1

    @pytest.mark.asyncio
    async def test_status_is_checked_before_probe_every_tick(self) -> None:
        calls: list[str] = []
        supervisor = FakeSupervisorClient([RUNNING], calls=calls)
        probe = FakeReadinessProbe([UNREACHABLE, 200], calls=calls)

        await _waiter(supervisor, probe).wait("mysql")

        assert calls == ["status", "probe", "status", "probe"]

    @pytest.mark.asyncio
    async def test_first_tick_waits_one_interval(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        probe = FakeReadinessProbe([200])
        loop = asyncio.get_running_loop()

        started = loop.time()
        await _waiter(supervisor, probe, tick_interval=timedelta(milliseconds=50)).wait("mysql")

        assert loop.time() - started >= 0.04


# ---------------------------------------------------------------------------
# Terminal failures
# ---------------------------------------------------------------------------


class TestReadinessTerminalFailures:
    @pytest.mark.asyncio
    async def test_status_query_failure_stops_immediately(self) -> None:
        supervisor = FakeSupervisorClient([SupervisorException("monit unreachable")])
        probe = FakeReadinessProbe([200])

        with pytest.raises(StatusQueryFailedException) as exc_info:
            await _waiter(supervisor, probe).wait("mysql")

        assert len(supervisor.status_calls) == 1
        assert probe.probe_count == 0
        assert exc_info.value.context["service"] == "mysql"
        assert isinstance(exc_info.value.__cause__, SupervisorException)

    @pytest.mark.asyncio
    async def test_status_query_failure_after_transient_ticks(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING, RUNNING, SupervisorException("gone")])
        probe = FakeReadinessProbe([UNREACHABLE])

        with pytest.raises(StatusQueryFailedException):
            await _waiter(supervisor, probe).wait("mysql")

        assert len(supervisor.status_calls) == 3
        assert probe.probe_count == 2

    @pytest.mark.parametrize(
        "status",
        [ServiceStatus.STOPPED, ServiceStatus.FAILING, ServiceStatus.STARTING, ServiceStatus.UNKNOWN],
    )
    @pytest.mark.asyncio
    async def test_not_running_fails_without_probing(self, status: ServiceStatus) -> None:
        supervisor = FakeSupervisorClient([status])
        probe = FakeReadinessProbe([200])

        with pytest.raises(ProcessNotRunningException, match="job failed during startup") as exc_info:
            await _waiter(supervisor, probe).wait("mysql")

        assert probe.probe_count == 0
        assert exc_info.value.context["status"] == status.value

    @pytest.mark.asyncio
    async def test_process_dies_after_transient_ticks(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING, ServiceStatus.FAILING])
        probe = FakeReadinessProbe([UNREACHABLE])

        with pytest.raises(ProcessNotRunningException):
            await _waiter(supervisor, probe).wait("mysql")

        assert probe.probe_count == 1

    @pytest.mark.parametrize("prior_unreachable", [0, 1, 3])
    @pytest.mark.asyncio
    async def test_non_200_answer_is_terminal(self, prior_unreachable: int) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        probe = FakeReadinessProbe([UNREACHABLE] * prior_unreachable + [503, 200])

        with pytest.raises(ReadinessRejectedException, match="503") as exc_info:
            await _waiter(supervisor, probe).wait("mysql")

        assert probe.probe_count == prior_unreachable + 1
        assert exc_info.value.context["status_code"] == 503

    @pytest.mark.asyncio
    async def test_other_success_codes_are_rejected(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        probe = FakeReadinessProbe([204])

        with pytest.raises(ReadinessRejectedException):
            await _waiter(supervisor, probe).wait("mysql")


# ---------------------------------------------------------------------------
# Bounds and cancellation
# ---------------------------------------------------------------------------


class TestReadinessBounds:
    @pytest.mark.asyncio
    async def test_max_wait_raises_timeout(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        probe = FakeReadinessProbe([UNREACHABLE])
        waiter = _waiter(
            supervisor,
            probe,
            tick_interval=timedelta(milliseconds=5),
            max_wait=timedelta(milliseconds=50),
        )

        with pytest.raises(ReadinessTimeoutException) as exc_info:
            await waiter.wait("mysql")

        assert exc_info.value.code == "TIMEOUT"
        assert probe.probe_count >= 1

    @pytest.mark.asyncio
    async def test_max_wait_does_not_affect_fast_success(self) -> None:
        waiter = _waiter(
            FakeSupervisorClient([RUNNING]),
            FakeReadinessProbe([200]),
            max_wait=timedelta(seconds=5),
        )

        assert await waiter.wait("mysql") == 1

    @pytest.mark.asyncio
    async def test_cancel_set_before_wait(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(WaitCancelledException):
            await _waiter(supervisor, FakeReadinessProbe([200])).wait("mysql", cancel)

        assert supervisor.status_calls == []

    @pytest.mark.asyncio
    async def test_cancel_interrupts_tick_sleep(self) -> None:
        supervisor = FakeSupervisorClient([RUNNING])
        waiter = _waiter(supervisor, FakeReadinessProbe([200]), tick_interval=timedelta(seconds=30))
        cancel = asyncio.Event()

        task = asyncio.create_task(waiter.wait("mysql", cancel))
        await asyncio.sleep(0.01)
        cancel.set()

        with pytest.raises(WaitCancelledException):
            await asyncio.wait_for(task, timeout=1)
        assert supervisor.status_calls == []

    @pytest.mark.asyncio
    async def test_cancel_interrupts_in_flight_probe(self) -> None:
        probe = HangingProbe()
        waiter = _waiter(FakeSupervisorClient([RUNNING]), probe)
        cancel = asyncio.Event()

        task = asyncio.create_task(waiter.wait("mysql", cancel))
        await asyncio.wait_for(probe.started.wait(), timeout=1)
        cancel.set()

        with pytest.raises(WaitCancelledException) as exc_info:
            await asyncio.wait_for(task, timeout=1)
        assert exc_info.value.code == "CANCELLED"
        assert probe.cancelled

    @pytest.mark.asyncio
    async def test_terminal_failure_wins_over_unset_cancel(self) -> None:
        cancel = asyncio.Event()
        waiter = _waiter(FakeSupervisorClient([ServiceStatus.STOPPED]), FakeReadinessProbe([200]))

        with pytest.raises(ProcessNotRunningException):
            await waiter.wait("mysql", cancel)

    @pytest.mark.asyncio
    async def test_success_with_cancel_token(self) -> None:
        cancel = asyncio.Event()
        waiter = _waiter(FakeSupervisorClient([RUNNING]), FakeReadinessProbe([UNREACHABLE, 200]))

        assert await waiter.wait("mysql", cancel) == 2

    @pytest.mark.asyncio
    async def test_task_cancellation_propagates(self) -> None:
        waiter = _waiter(
            FakeSupervisorClient([RUNNING]),
            FakeReadinessProbe([200]),
            tick_interval=timedelta(seconds=30),
        )

        task = asyncio.create_task(waiter.wait("mysql", asyncio.Event()))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
