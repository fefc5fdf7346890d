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
"""File-backed StateStore writing the marker with an atomic replace."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

import structlog

from galera_sidecar.kernel.exceptions import StateStoreException
from galera_sidecar.state.ports import StateMarker

logger = structlog.get_logger("galera_sidecar.state.file_store")

# The supervised process's startup scripts run as a different user
MARKER_FILE_MODE = 0o777


class FileStateStore:
    """Writes the marker token to a single well-known path.

    The token is written to a temporary sibling file first and renamed over
    the target, so a reader never observes a truncated marker.
    """

    def __init__(self, path: str | Path, mode: int = MARKER_FILE_MODE) -> None:
        self._path = Path(path)
        self._mode = mode

    @property
    def path(self) -> Path:
        return self._path

    async def write(self, marker: StateMarker) -> None:
        await asyncio.to_thread(self._write_sync, marker)
        logger.info("write_state_file", path=str(self._path), marker=marker.value)

    def read(self) -> StateMarker | None:
        """Return the persisted marker, or None when no marker has been written."""
        try:
            raw = self._path.read_text()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StateStoreException(
                f"failed to read state file: {exc}",
                context={"path": str(self._path)},
            ) from exc
        try:
            return StateMarker(raw)
        except ValueError as exc:
            raise StateStoreException(
                f"state file holds unknown marker {raw!r}",
                context={"path": str(self._path), "marker": raw},
            ) from exc

    def _write_sync(self, marker: StateMarker) -> None:
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self._path.name}.")
            with os.fdopen(fd, "w") as f:
                f.write(marker.value)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, self._mode)
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise StateStoreException(
                f"failed to initialize state file: {exc}",
                context={"path": str(self._path), "marker": marker.value},
            ) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
