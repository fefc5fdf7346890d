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
"""Process supervisor (Monit) configuration properties."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field

from galera_sidecar.core.config import config_properties


@config_properties(prefix="sidecar.supervisor")
class SupervisorProperties(BaseModel):
    """Connection settings for the Monit HTTP interface (sidecar.supervisor.*)."""

    host: str = "127.0.0.1"
    port: int = Field(default=2822, ge=1, le=65535)
    username: str = ""
    password: str = ""
    timeout: float = Field(default=10.0, gt=0)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def timeout_delta(self) -> timedelta:
        return timedelta(seconds=self.timeout)
