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
"""galera-sidecar CLI — drive lifecycle intents for the local node."""

from __future__ import annotations

import asyncio
import json
import signal
from pathlib import Path

import click

from galera_sidecar.cli.console import print_failure, print_success
from galera_sidecar.core.application import SidecarApplication
from galera_sidecar.kernel.exceptions import SidecarException
from galera_sidecar.lifecycle.intent import LifecycleIntent
from galera_sidecar.lifecycle.outcome import Outcome


def build_application(config_path: Path | None, json_logs: bool = False) -> SidecarApplication:
    """Build the application for one CLI invocation."""
    return SidecarApplication.from_config_file(config_path, json_logs=json_logs)


async def _run_intent(config_path: Path | None, intent: LifecycleIntent, json_logs: bool) -> Outcome:
    async with build_application(config_path, json_logs=json_logs) as app:
        # SIGTERM interrupts a pending readiness wait instead of killing the process mid-tick
        cancel = asyncio.Event()
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGTERM, cancel.set)
        try:
            return await app.orchestrator.run(intent, cancel)
        finally:
            loop.remove_signal_handler(signal.SIGTERM)


async def _fetch_status(config_path: Path | None) -> str:
    async with build_application(config_path) as app:
        return await app.orchestrator.status()


def _report(outcome: Outcome, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(outcome.to_dict()))
    elif outcome.error is None:
        print_success(str(outcome.message))
    else:
        print_failure(outcome.code, str(outcome.error), outcome.error.context)

    if not outcome.ok:
        raise SystemExit(1)


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Sidecar YAML or TOML config file (defaults are packaged).",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Print the outcome as JSON and render logs as JSON on stderr.")


@click.group()
@click.version_option(package_name="galera-sidecar")
def cli() -> None:
    """Galera sidecar — bootstrap, join, single-node start, stop and status."""


def _intent_command(intent: LifecycleIntent, help_text: str) -> click.Command:
    @config_option
    @json_option
    def command(config_path: Path | None, as_json: bool) -> None:
        try:
            outcome = asyncio.run(_run_intent(config_path, intent, as_json))
        except SidecarException as exc:
            # Configuration errors surface before an orchestrator exists
            outcome = Outcome.failure(intent, exc)
        _report(outcome, as_json)

    command.__doc__ = help_text
    return click.command(name=intent.value.replace("_", "-"))(command)


cli.add_command(_intent_command(LifecycleIntent.BOOTSTRAP, "Bootstrap a new cluster from this node."))
cli.add_command(_intent_command(LifecycleIntent.JOIN, "Start the node and join the existing cluster."))
cli.add_command(_intent_command(LifecycleIntent.SINGLE_NODE, "Start the node standalone."))
cli.add_command(_intent_command(LifecycleIntent.STOP, "Stop the node."))


@cli.command(name="status")
@config_option
def status_command(config_path: Path | None) -> None:
    """Print the supervisor's status for the node."""
    try:
        status = asyncio.run(_fetch_status(config_path))
    except SidecarException as exc:
        print_failure(exc.code, str(exc), exc.context)
        raise SystemExit(1) from exc
    click.echo(status)
