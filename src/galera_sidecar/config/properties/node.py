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
"""Node identity configuration properties."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from galera_sidecar.core.config import config_properties

ARBITRATOR_SERVICE_NAME = "garbd"


@config_properties(prefix="sidecar.node")
class NodeProperties(BaseModel):
    """Configuration for the supervised node (sidecar.node.*)."""

    service_name: str = Field(default="mysql", min_length=1)
    state_file_path: str = "/var/vcap/store/mysql/state.txt"
    galera_init_address: str = "127.0.0.1:8114"

    @field_validator("galera_init_address")
    @classmethod
    def _require_host_port(cls, value: str) -> str:
        host, sep, port = value.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"expected host:port, got {value!r}")
        return value
