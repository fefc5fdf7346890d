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
"""Outcome of a lifecycle operation as handed to a request façade."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from galera_sidecar.kernel.exceptions import SidecarException
from galera_sidecar.lifecycle.intent import LifecycleIntent


@dataclass(frozen=True)
class Outcome:
    """Either a success message or a classified error, never both."""

    intent: LifecycleIntent
    message: str | None = None
    error: SidecarException | None = None

    def __post_init__(self) -> None:
        if (self.message is None) == (self.error is None):
            raise ValueError("Outcome requires exactly one of message or error")

    @classmethod
    def success(cls, intent: LifecycleIntent, message: str) -> Outcome:
        return cls(intent=intent, message=message)

    @classmethod
    def failure(cls, intent: LifecycleIntent, error: SidecarException) -> Outcome:
        return cls(intent=intent, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> str | None:
        return None if self.error is None else self.error.code

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dictionary."""
        if self.error is None:
            return {"intent": self.intent.value, "ok": True, "message": self.message}
        return {
            "intent": self.intent.value,
            "ok": False,
            "error": {
                "code": self.error.code,
                "message": str(self.error),
                "context": dict(self.error.context),
            },
        }
