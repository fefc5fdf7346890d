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
"""LifecycleOrchestrator — sequences lifecycle intents for the local node.

For a start-type intent the orchestrator declares the target state, asks the
supervisor to start the service, then blocks until the readiness wait is
decisive. The marker is always written before the start command and a failed
write means the supervisor is never contacted.

One orchestrator exists per node. It does not serialise concurrent calls;
the request façade is expected to run one lifecycle change at a time.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from galera_sidecar.config.properties.node import ARBITRATOR_SERVICE_NAME
from galera_sidecar.kernel.exceptions import (
    InvalidIntentException,
    PersistenceFailureException,
    SidecarException,
    StateStoreException,
    SupervisorException,
    SupervisorFailureException,
)
from galera_sidecar.lifecycle.intent import START_PLANS, STOP_SUCCESS_MESSAGE, LifecycleIntent
from galera_sidecar.lifecycle.outcome import Outcome
from galera_sidecar.lifecycle.readiness_wait import ReadinessWaiter
from galera_sidecar.state.ports import StateStore
from galera_sidecar.supervisor.ports import SupervisorClient


class LifecycleOrchestrator:
    """Drives one supervised service through bootstrap, join, single-node and stop."""

    def __init__(
        self,
        service_name: str,
        state_store: StateStore,
        supervisor: SupervisorClient,
        waiter: ReadinessWaiter,
        logger: Any | None = None,
    ) -> None:
        self._service_name = service_name
        self._state_store = state_store
        self._supervisor = supervisor
        self._waiter = waiter
        base = logger if logger is not None else structlog.get_logger("galera_sidecar.lifecycle.orchestrator")
        self._logger = base.bind(service=service_name)

    @property
    def service_name(self) -> str:
        return self._service_name

    async def bootstrap(self, cancel: asyncio.Event | None = None) -> str:
        """Seed a new cluster from this node. Never allowed for the arbitrator."""
        if self._service_name == ARBITRATOR_SERVICE_NAME:
            raise InvalidIntentException(
                "bootstrapping arbitrator not allowed",
                context={"service": self._service_name, "intent": LifecycleIntent.BOOTSTRAP.value},
            )
        return await self._start(LifecycleIntent.BOOTSTRAP, cancel)

    async def join(self, cancel: asyncio.Event | None = None) -> str:
        """Start the service and join the existing cluster."""
        return await self._start(LifecycleIntent.JOIN, cancel)

    async def single_node(self, cancel: asyncio.Event | None = None) -> str:
        """Start the service as a standalone node."""
        return await self._start(LifecycleIntent.SINGLE_NODE, cancel)

    async def stop(self) -> str:
        """Ask the supervisor to stop the service. No marker, no wait."""
        self._logger.info("stop_service")
        try:
            await self._supervisor.stop(self._service_name)
        except SupervisorException as exc:
            raise SupervisorFailureException(
                str(exc),
                context={"service": self._service_name, "intent": LifecycleIntent.STOP.value, **exc.context},
            ) from exc
        return STOP_SUCCESS_MESSAGE

    async def status(self) -> str:
        """Return the supervisor's current status string for the service."""
        status = await self._supervisor.status(self._service_name)
        return status.value

    async def execute(self, intent: LifecycleIntent, cancel: asyncio.Event | None = None) -> str:
        """Dispatch *intent* to the matching operation and return its success message."""
        if intent is LifecycleIntent.BOOTSTRAP:
            return await self.bootstrap(cancel)
        if intent is LifecycleIntent.JOIN:
            return await self.join(cancel)
        if intent is LifecycleIntent.SINGLE_NODE:
            return await self.single_node(cancel)
        return await self.stop()

    async def run(self, intent: LifecycleIntent, cancel: asyncio.Event | None = None) -> Outcome:
        """Execute *intent* and fold the result or classified error into an Outcome."""
        try:
            message = await self.execute(intent, cancel)
        except SidecarException as exc:
            self._logger.error("lifecycle_failed", intent=intent.value, code=exc.code, error=str(exc))
            return Outcome.failure(intent, exc)
        self._logger.info("lifecycle_succeeded", intent=intent.value, message=message)
        return Outcome.success(intent, message)

    async def _start(self, intent: LifecycleIntent, cancel: asyncio.Event | None) -> str:
        plan = START_PLANS[intent]
        log = self._logger.bind(intent=intent.value)

        try:
            await self._state_store.write(plan.marker)
        except StateStoreException as exc:
            raise PersistenceFailureException(
                "failed to initialize state file",
                context={"service": self._service_name, "marker": plan.marker.value, **exc.context},
            ) from exc

        log.info("start_service", marker=plan.marker.value)
        try:
            await self._supervisor.start(self._service_name)
        except SupervisorException as exc:
            raise SupervisorFailureException(
                str(exc),
                context={"service": self._service_name, "intent": intent.value, **exc.context},
            ) from exc

        ticks = await self._waiter.wait(self._service_name, cancel)
        log.info("service_ready", ticks=ticks)
        return plan.success_message
