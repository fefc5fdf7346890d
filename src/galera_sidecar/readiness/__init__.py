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
"""Readiness endpoint — probe port and httpx adapter."""

from galera_sidecar.readiness.httpx_probe import HttpxReadinessProbe
from galera_sidecar.readiness.ports import READY_STATUS_CODE, ProbeResult, ReadinessProbe

__all__ = ["READY_STATUS_CODE", "HttpxReadinessProbe", "ProbeResult", "ReadinessProbe"]
