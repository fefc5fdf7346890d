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
"""Readiness wait configuration properties."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field

from galera_sidecar.core.config import config_properties


@config_properties(prefix="sidecar.readiness")
class ReadinessProperties(BaseModel):
    """Polling cadence and bounds for the readiness wait (sidecar.readiness.*).

    ``max_wait`` is unset by default: the wait only ends on a decisive
    answer from the supervisor or the readiness endpoint.
    """

    tick_interval: float = Field(default=1.0, ge=0)
    probe_timeout: float = Field(default=1.0, gt=0)
    max_wait: float | None = Field(default=None, gt=0)

    def tick_interval_delta(self) -> timedelta:
        return timedelta(seconds=self.tick_interval)

    def probe_timeout_delta(self) -> timedelta:
        return timedelta(seconds=self.probe_timeout)

    def max_wait_delta(self) -> timedelta | None:
        return None if self.max_wait is None else timedelta(seconds=self.max_wait)
