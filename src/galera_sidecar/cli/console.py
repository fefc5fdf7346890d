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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

SIDECAR_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "dim": "dim",
})

console = Console(theme=SIDECAR_THEME, highlight=False)
err_console = Console(theme=SIDECAR_THEME, highlight=False, stderr=True)


def print_success(message: str) -> None:
    console.print(f"[success]✓[/success] {message}")


def print_failure(code: str | None, message: str, context: dict | None = None) -> None:
    err_console.print(f"[error]✗[/error] [error]{code or 'ERROR'}[/error] {message}", markup=True)
    for key, value in (context or {}).items():
        err_console.print(f"    [dim]{key}[/dim] = {value}")
