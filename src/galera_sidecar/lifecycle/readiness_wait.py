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
"""Readiness wait: polls the supervisor and the readiness endpoint until decisive.

Every tick first asks the supervisor whether the service is running, then,
only if it is, probes the readiness endpoint once. The two signals are
trusted asymmetrically:

- a failed status query, a non-running status, or a non-200 answer from the
  endpoint ends the wait immediately;
- an unreachable endpoint (connection refused, probe timeout) is the one
  transient condition; it is logged and the next tick tries again.
"""

from __future__ import annotations

import asyncio
import contextlib
from datetime import timedelta
from typing import Any

import structlog

from galera_sidecar.kernel.exceptions import (
    ProcessNotRunningException,
    ReadinessRejectedException,
    ReadinessTimeoutException,
    ReadinessUnreachableException,
    StatusQueryFailedException,
    SupervisorException,
    WaitCancelledException,
)
from galera_sidecar.readiness.ports import ReadinessProbe
from galera_sidecar.supervisor.ports import ServiceStatus, SupervisorClient


class ReadinessWaiter:
    """Blocks the calling task until the service is ready or a terminal failure.

    Args:
        supervisor: Client used for the per-tick status query.
        probe: Readiness endpoint probe, bounded by its own timeout.
        tick_interval: Delay before each tick, including the first.
        max_wait: Upper bound for the whole wait; None waits until decisive.
        logger: structlog logger; defaults to this module's logger.
    """

    def __init__(
        self,
        supervisor: SupervisorClient,
        probe: ReadinessProbe,
        tick_interval: timedelta = timedelta(seconds=1),
        max_wait: timedelta | None = None,
        logger: Any | None = None,
    ) -> None:
        self._supervisor = supervisor
        self._probe = probe
        self._tick_seconds = tick_interval.total_seconds()
        self._max_wait_seconds = None if max_wait is None else max_wait.total_seconds()
        self._logger = logger if logger is not None else structlog.get_logger("galera_sidecar.lifecycle.readiness_wait")

    async def wait(self, service_name: str, cancel: asyncio.Event | None = None) -> int:
        """Wait for readiness and return the number of ticks it took.

        Setting *cancel* interrupts the pending sleep or the in-flight probe
        and raises WaitCancelledException.
        """
        if cancel is not None and cancel.is_set():
            raise WaitCancelledException(
                f"readiness wait for service {service_name!r} cancelled before the first tick",
                context={"service": service_name, "tick": 0},
            )

        deadline = asyncio.timeout(self._max_wait_seconds)
        try:
            async with deadline:
                if cancel is None:
                    return await self._poll(service_name)
                return await self._poll_until_cancelled(service_name, cancel)
        except TimeoutError as exc:
            if not deadline.expired():
                raise
            raise ReadinessTimeoutException(
                f"service {service_name!r} not ready after {self._max_wait_seconds}s",
                context={"service": service_name, "max_wait": self._max_wait_seconds},
            ) from exc

    async def _poll_until_cancelled(self, service_name: str, cancel: asyncio.Event) -> int:
        poll = asyncio.ensure_future(self._poll(service_name))
        cancelled = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({poll, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not poll.done():
                poll.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await poll

        if not poll.cancelled():
            return poll.result()

        self._logger.info("readiness_wait_cancelled", service=service_name)
        raise WaitCancelledException(
            f"readiness wait for service {service_name!r} cancelled",
            context={"service": service_name},
        )

    async def _poll(self, service_name: str) -> int:
        tick = 0
        while True:
            await asyncio.sleep(self._tick_seconds)
            tick += 1
            if await self._check(service_name, tick):
                return tick

    async def _check(self, service_name: str, tick: int) -> bool:
        """Run one tick; True when ready, False to try again, raise when terminal."""
        try:
            status = await self._supervisor.status(service_name)
        except SupervisorException as exc:
            raise StatusQueryFailedException(
                f"error fetching status for service {service_name!r}",
                context={"service": service_name, "tick": tick},
            ) from exc

        self._logger.info("check_monit_state", service=service_name, state=status.value, tick=tick)

        if status is not ServiceStatus.RUNNING:
            raise ProcessNotRunningException(
                "job failed during startup",
                context={"service": service_name, "status": status.value, "tick": tick},
            )

        self._logger.info("check_galera_init", service=service_name, tick=tick)
        try:
            result = await self._probe.probe()
        except ReadinessUnreachableException as exc:
            self._logger.warning("check_galera_init", service=service_name, tick=tick, error=str(exc))
            return False

        self._logger.info("check_galera_init", service=service_name, tick=tick, status=result.describe())

        if not result.ready:
            raise ReadinessRejectedException(
                f"unexpected response from node: {result.describe()}",
                context={"service": service_name, "status_code": result.status_code, "tick": tick},
            )

        return True
