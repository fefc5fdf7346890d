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
"""Logging configuration properties."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from galera_sidecar.core.config import config_properties


@config_properties(prefix="sidecar.logging")
class LoggingProperties(BaseModel):
    """Log rendering and levels (sidecar.logging.*).

    ``level`` maps logger names to level names; the ``root`` entry sets the
    root logger, every other entry a module logger such as
    ``galera_sidecar.lifecycle``.
    """

    format: Literal["console", "json"] = "console"
    level: dict[str, str] = Field(default_factory=lambda: {"root": "INFO"})

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("level")
    @classmethod
    def _known_levels(cls, value: dict[str, str]) -> dict[str, str]:
        levels = {name: str(level).upper() for name, level in value.items()}
        for name, level in levels.items():
            if not isinstance(logging.getLevelNamesMapping().get(level), int):
                raise ValueError(f"unknown log level {level!r} for {name!r}")
        return levels

    @property
    def root_level(self) -> str:
        return self.level.get("root", "INFO")

    @property
    def module_levels(self) -> dict[str, str]:
        return {name: level for name, level in self.level.items() if name != "root"}
