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
"""httpx-based ReadinessProbe."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any

import httpx

from galera_sidecar.kernel.exceptions import ReadinessUnreachableException
from galera_sidecar.readiness.ports import ProbeResult


class HttpxReadinessProbe:
    """Probes ``GET http://{address}/`` bounded by one timeout for the whole request.

    httpx applies its timeout to each connect, read and write step, so a
    server trickling its body would never trip it; the request as a whole is
    also wrapped in ``asyncio.wait_for``.

    Any request-level failure (refused, timed out, undecodable body) means the
    node gave no usable answer this tick and is reported as unreachable.
    """

    def __init__(
        self,
        address: str,
        timeout: timedelta = timedelta(seconds=1),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"http://{address}/"
        self._timeout_seconds = timeout.total_seconds()
        kwargs: dict[str, Any] = {"timeout": self._timeout_seconds}
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    @property
    def url(self) -> str:
        return self._url

    async def probe(self) -> ProbeResult:
        try:
            response = await asyncio.wait_for(self._client.get(self._url), timeout=self._timeout_seconds)
        except TimeoutError as exc:
            raise ReadinessUnreachableException(
                f"readiness endpoint {self._url} did not answer within {self._timeout_seconds}s",
                context={"url": self._url, "timeout": self._timeout_seconds},
            ) from exc
        except httpx.RequestError as exc:
            raise ReadinessUnreachableException(
                f"readiness endpoint {self._url} unreachable: {exc!r}",
                context={"url": self._url},
            ) from exc
        return ProbeResult(status_code=response.status_code, reason=response.reason_phrase)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpxReadinessProbe:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
