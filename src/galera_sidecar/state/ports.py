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
"""Outbound port: persistence of the declared state marker."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class StateMarker(str, Enum):
    """Token telling the supervised process which startup path to take."""

    NEEDS_BOOTSTRAP = "NEEDS_BOOTSTRAP"
    CLUSTERED = "CLUSTERED"
    SINGLE_NODE = "SINGLE_NODE"


@runtime_checkable
class StateStore(Protocol):
    """Durable, whole-value storage for the declared state marker.

    Implementations raise StateStoreException when the marker cannot be
    persisted.
    """

    async def write(self, marker: StateMarker) -> None: ...
