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
"""Outbound port: the database process's own readiness endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

READY_STATUS_CODE = 200


@dataclass(frozen=True)
class ProbeResult:
    """The endpoint's answer to a single readiness probe."""

    status_code: int
    reason: str = ""

    @property
    def ready(self) -> bool:
        return self.status_code == READY_STATUS_CODE

    def describe(self) -> str:
        return f"{self.status_code} {self.reason}".strip()


@runtime_checkable
class ReadinessProbe(Protocol):
    """Issues one bounded probe against the readiness endpoint.

    Raises ReadinessUnreachableException when no answer was received
    (connection refused, timeout). Any answer, positive or not, is returned.
    """

    async def probe(self) -> ProbeResult: ...
