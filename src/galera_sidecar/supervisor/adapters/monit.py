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
"""Monit-backed SupervisorClient using httpx."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import timedelta
from typing import Any

import httpx
import structlog

from galera_sidecar.kernel.exceptions import SupervisorException
from galera_sidecar.supervisor.ports import ServiceStatus

logger = structlog.get_logger("galera_sidecar.supervisor.monit")

STATUS_PATH = "/_status"

# Monit <monitor> values
_MONITOR_OFF = 0
_MONITOR_INIT = 2

# Monit <pendingaction> codes
_PENDING_STARTING = {2, 6, 7}  # restart, start, monitor
_PENDING_STOPPING = {3, 5}  # stop, unmonitor


class MonitSupervisorClient:
    """Talks to Monit's embedded HTTP server.

    Commands are sent as ``POST /{service}`` with ``action=start|stop``;
    status comes from the XML status report at ``/_status?format=xml``.
    """

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        timeout: timedelta = timedelta(seconds=10),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {
            "base_url": base_url,
            "timeout": timeout.total_seconds(),
        }
        if username or password:
            kwargs["auth"] = httpx.BasicAuth(username, password)
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def start(self, service_name: str) -> None:
        await self._send_action(service_name, "start")

    async def stop(self, service_name: str) -> None:
        await self._send_action(service_name, "stop")

    async def status(self, service_name: str) -> ServiceStatus:
        try:
            response = await self._client.get(STATUS_PATH, params={"format": "xml"})
        except httpx.HTTPError as exc:
            raise SupervisorException(
                f"failed to fetch monit status: {exc}",
                context={"service": service_name},
            ) from exc

        if not response.is_success:
            raise SupervisorException(
                f"unexpected response from monit status: {response.status_code}",
                context={"service": service_name, "status_code": response.status_code},
            )

        return parse_status_report(response.content, service_name)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> MonitSupervisorClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _send_action(self, service_name: str, action: str) -> None:
        logger.info("send_monit_action", service=service_name, action=action)
        try:
            response = await self._client.post(f"/{service_name}", data={"action": action})
        except httpx.HTTPError as exc:
            raise SupervisorException(
                f"failed to send {action} to monit for service {service_name!r}: {exc}",
                context={"service": service_name, "action": action},
            ) from exc

        if not response.is_success:
            raise SupervisorException(
                f"monit rejected {action} for service {service_name!r}: {response.status_code}",
                context={"service": service_name, "action": action, "status_code": response.status_code},
            )


def parse_status_report(document: bytes | str, service_name: str) -> ServiceStatus:
    """Map the named service's entry in a Monit XML status report to a ServiceStatus.

    Monit 5.x reports the name either as a ``name`` attribute or as a
    ``<name>`` child element; both are accepted.
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise SupervisorException(
            f"malformed monit status report: {exc}",
            context={"service": service_name},
        ) from exc

    for service in root.iter("service"):
        name = service.get("name") or service.findtext("name")
        if name == service_name:
            return _status_of(service, service_name)

    raise SupervisorException(
        f"service {service_name!r} not found in monit status report",
        context={"service": service_name},
    )


def _status_of(service: ET.Element, service_name: str) -> ServiceStatus:
    try:
        monitor = int(service.findtext("monitor", "1"))
        pending = int(service.findtext("pendingaction", "0"))
        status = int(service.findtext("status", "0"))
    except ValueError as exc:
        raise SupervisorException(
            f"non-numeric field in monit status for service {service_name!r}",
            context={"service": service_name},
        ) from exc

    if monitor == _MONITOR_OFF:
        return ServiceStatus.STOPPED
    if monitor == _MONITOR_INIT or pending in _PENDING_STARTING:
        return ServiceStatus.STARTING
    if pending in _PENDING_STOPPING:
        return ServiceStatus.STOPPING
    if status != 0:
        return ServiceStatus.FAILING
    return ServiceStatus.RUNNING
