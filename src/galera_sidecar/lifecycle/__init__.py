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
"""Lifecycle orchestration — intents, readiness wait, and the orchestrator."""

from galera_sidecar.lifecycle.intent import START_PLANS, STOP_SUCCESS_MESSAGE, LifecycleIntent, StartPlan
from galera_sidecar.lifecycle.orchestrator import LifecycleOrchestrator
from galera_sidecar.lifecycle.outcome import Outcome
from galera_sidecar.lifecycle.readiness_wait import ReadinessWaiter

__all__ = [
    "START_PLANS",
    "STOP_SUCCESS_MESSAGE",
    "LifecycleIntent",
    "LifecycleOrchestrator",
    "Outcome",
    "ReadinessWaiter",
    "StartPlan",
]
