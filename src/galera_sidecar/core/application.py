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
"""SidecarApplication — builds the orchestrator and its adapters once per process.

Startup sequence:
1. Load configuration (packaged defaults, optional file, env overrides)
2. Bind the logging section and configure structlog
3. Bind node, supervisor and readiness properties; bind the node into the log context
4. Build the Monit client, readiness probe, state store and orchestrator
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from galera_sidecar.config.properties import (
    LoggingProperties,
    NodeProperties,
    ReadinessProperties,
    SupervisorProperties,
)
from galera_sidecar.core.config import Config
from galera_sidecar.lifecycle.orchestrator import LifecycleOrchestrator
from galera_sidecar.lifecycle.readiness_wait import ReadinessWaiter
from galera_sidecar.logging import setup as logging_setup
from galera_sidecar.readiness.httpx_probe import HttpxReadinessProbe
from galera_sidecar.state.file_store import FileStateStore
from galera_sidecar.supervisor.adapters.monit import MonitSupervisorClient


class SidecarApplication:
    """Owns the configured orchestrator and closes its HTTP clients on shutdown.

    Usage::

        async with SidecarApplication.from_config_file("sidecar.yaml") as app:
            outcome = await app.orchestrator.run(LifecycleIntent.JOIN)
    """

    def __init__(self, config: Config, configure_logging: bool = True, json_logs: bool = False) -> None:
        self.config = config

        self.logging_properties = config.bind(LoggingProperties)
        if configure_logging:
            logging_setup.configure_logging(self.logging_properties, json_output=json_logs)
        self._logger = logging_setup.get_logger("galera_sidecar.application")

        self.node = config.bind(NodeProperties)
        self.supervisor_properties = config.bind(SupervisorProperties)
        self.readiness_properties = config.bind(ReadinessProperties)
        logging_setup.bind_node_context(self.node.service_name, self.node.galera_init_address)

        self._supervisor = MonitSupervisorClient(
            base_url=self.supervisor_properties.base_url,
            username=self.supervisor_properties.username,
            password=self.supervisor_properties.password,
            timeout=self.supervisor_properties.timeout_delta(),
        )
        self._probe = HttpxReadinessProbe(
            self.node.galera_init_address,
            timeout=self.readiness_properties.probe_timeout_delta(),
        )
        waiter = ReadinessWaiter(
            self._supervisor,
            self._probe,
            tick_interval=self.readiness_properties.tick_interval_delta(),
            max_wait=self.readiness_properties.max_wait_delta(),
        )
        self.orchestrator = LifecycleOrchestrator(
            service_name=self.node.service_name,
            state_store=FileStateStore(self.node.state_file_path),
            supervisor=self._supervisor,
            waiter=waiter,
            logger=logging_setup.get_logger("galera_sidecar.lifecycle"),
        )

    @classmethod
    def from_config_file(cls, path: str | Path | None = None, **kwargs: Any) -> SidecarApplication:
        return cls(Config.from_file(path), **kwargs)

    async def shutdown(self) -> None:
        """Close the supervisor and readiness HTTP clients."""
        self._logger.debug("shutting_down")
        await self._supervisor.close()
        await self._probe.close()
        logging_setup.clear_node_context()

    async def __aenter__(self) -> SidecarApplication:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()
