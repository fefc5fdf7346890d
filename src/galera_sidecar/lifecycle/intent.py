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
"""Lifecycle intents and what each one declares and reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from galera_sidecar.state.ports import StateMarker


class LifecycleIntent(str, Enum):
    """A requested transition for the local node, chosen by the caller."""

    BOOTSTRAP = "bootstrap"
    JOIN = "join"
    SINGLE_NODE = "single_node"
    STOP = "stop"


@dataclass(frozen=True)
class StartPlan:
    """Marker to declare and message to report for a start-type intent."""

    marker: StateMarker
    success_message: str


START_PLANS: dict[LifecycleIntent, StartPlan] = {
    LifecycleIntent.BOOTSTRAP: StartPlan(StateMarker.NEEDS_BOOTSTRAP, "cluster bootstrap successful"),
    LifecycleIntent.JOIN: StartPlan(StateMarker.CLUSTERED, "join cluster successful"),
    LifecycleIntent.SINGLE_NODE: StartPlan(StateMarker.SINGLE_NODE, "single node start successful"),
}

STOP_SUCCESS_MESSAGE = "stop successful"
