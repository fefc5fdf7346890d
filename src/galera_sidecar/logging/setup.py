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
"""structlog setup for the sidecar.

Logs always go to stderr: stdout belongs to command output, which the
``--json`` mode makes machine-readable. In that mode the log lines are
rendered as JSON as well, so a control plane scraping both streams never
has to parse console formatting.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from galera_sidecar.config.properties.logging import LoggingProperties


def configure_logging(properties: LoggingProperties, *, json_output: bool = False) -> None:
    """Configure structlog and the stdlib root logger from *properties*.

    *json_output* forces the JSON renderer regardless of the configured format.
    """
    structlog.configure(
        processors=_processors(json_output or properties.format == "json"),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=properties.root_level,
        force=True,
    )
    for name, level in properties.module_levels.items():
        logging.getLogger(name).setLevel(level)


def _processors(as_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if as_json:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def bind_node_context(service: str, galera_init_address: str) -> None:
    """Attach the node identity to every log line of the current context."""
    structlog.contextvars.bind_contextvars(service=service, galera_init=galera_init_address)


def clear_node_context() -> None:
    structlog.contextvars.unbind_contextvars("service", "galera_init")


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
