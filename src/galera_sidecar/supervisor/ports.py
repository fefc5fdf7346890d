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
"""Outbound port: process supervisor client."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class ServiceStatus(str, Enum):
    """Run status of a supervised service.

    Values are the supervisor's own vocabulary; adapters convert raw
    supervisor answers into a member as soon as they are received.
    """

    RUNNING = "running"
    STARTING = "starting"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILING = "failing"
    UNKNOWN = "unknown"


@runtime_checkable
class SupervisorClient(Protocol):
    """Start, stop and query a named service.

    Implementations raise SupervisorException on any failure; callers do not
    retry.
    """

    async def start(self, service_name: str) -> None: ...

    async def stop(self, service_name: str) -> None: ...

    async def status(self, service_name: str) -> ServiceStatus: ...
