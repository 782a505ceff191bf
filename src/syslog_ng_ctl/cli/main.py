"""syslog-ng-ctl CLI - control a running syslog-ng daemon.

Commands:
- ping: Check the daemon answers on its control socket
- reload: Reload the daemon configuration
- show-license-info: Print license information
- stats: Print per-source counters
- stats prometheus: Print counters in Prometheus text format

Exit codes: 1 for usage/configuration errors, 2 when the daemon or the
control socket could not satisfy the request.
"""

import asyncio
import json
import logging
import sys
from collections.abc import Coroutine
from dataclasses import asdict
from typing import Any, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from syslog_ng_ctl.channel import UnixSocketControlChannel
from syslog_ng_ctl.config import Settings
from syslog_ng_ctl.controller import Controller
from syslog_ng_ctl.exceptions import ControlError, StatsParseError
from syslog_ng_ctl.metrics import render_metric_families

T = TypeVar("T")

EXIT_USAGE = 1
EXIT_FAILURE = 2

app = typer.Typer(
    name="syslog-ng-ctl",
    help="Control a running syslog-ng daemon over its control socket",
    no_args_is_help=True,
)
stats_app = typer.Typer(help="Query per-source counters")
app.add_typer(stats_app, name="stats")

err_console = Console(stderr=True, soft_wrap=True)


@app.callback()
def main_callback(
    ctx: typer.Context,
    socket: str | None = typer.Option(
        None, "--socket", "-s", help="Control socket path (default: $CONTROL_SOCKET)"
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", "-t", help="Seconds to wait for a response (default: $CONTROL_TIMEOUT)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log protocol exchanges to stderr"),
) -> None:
    """Control a running syslog-ng daemon."""
    try:
        settings = Settings()
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"]).upper()
            err_console.print(f"Invalid {field} setting: {error['msg']}", markup=False)
        raise typer.Exit(EXIT_USAGE)
    if socket:
        settings.control_socket = socket
    if timeout is not None:
        settings.control_timeout = timeout
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = settings


def _get_controller(ctx: typer.Context) -> Controller:
    """Build a Controller from the resolved settings, exit 1 if no socket is set."""
    settings: Settings = ctx.obj
    if not settings.control_socket:
        err_console.print(
            "Control socket not specified. Set CONTROL_SOCKET environment variable or pass --socket."
        )
        raise typer.Exit(EXIT_USAGE)
    return Controller(
        UnixSocketControlChannel(settings.control_socket, timeout=settings.control_timeout)
    )


def _run(coro: Coroutine[Any, Any, T], action: str) -> T:
    """Run one controller coroutine, turning failures into exit code 2."""
    try:
        return asyncio.run(coro)
    except ControlError as e:
        err_console.print(f"An error occurred while {action}: {e}", markup=False)
        raise typer.Exit(EXIT_FAILURE)


def _report_parse_errors(error: StatsParseError | None, action: str) -> None:
    if error is None:
        return
    err_console.print(f"An error occurred while {action}: {error.message}", markup=False)
    for exc in error.exceptions:
        err_console.print(f"  {exc}", markup=False)
    raise typer.Exit(EXIT_FAILURE)


@app.command("ping")
def ping(ctx: typer.Context) -> None:
    """Check that the daemon answers on its control socket."""
    controller = _get_controller(ctx)
    _run(controller.ping(), "pinging syslog-ng")


@app.command("reload")
def reload(ctx: typer.Context) -> None:
    """Reload the daemon configuration."""
    controller = _get_controller(ctx)
    _run(controller.reload(), "reloading syslog-ng config")


@app.command("show-license-info")
def show_license_info(ctx: typer.Context) -> None:
    """Print the daemon's license information."""
    controller = _get_controller(ctx)
    info = _run(controller.get_license_info(), "getting license info")
    typer.echo(info)


@stats_app.callback(invoke_without_command=True)
def stats(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print per-source counters."""
    if ctx.invoked_subcommand is not None:
        return

    controller = _get_controller(ctx)
    result = _run(controller.stats(), "querying stats")

    if json_output:
        typer.echo(json.dumps([asdict(s) for s in result.stats], indent=2))
    else:
        console = Console()
        table = Table(title="Stats")
        table.add_column("Source Name", style="cyan")
        table.add_column("Source ID")
        table.add_column("Instance")
        table.add_column("State", justify="center")
        table.add_column("Type", style="green")
        table.add_column("Number", justify="right")
        for s in result.stats:
            table.add_row(
                escape(s.source_name),
                escape(s.source_id),
                escape(s.source_instance),
                s.source_state.value,
                escape(s.type),
                str(s.number),
            )
        console.print(table)

    _report_parse_errors(result.error, "querying stats")


@stats_app.command("prometheus")
def stats_prometheus(ctx: typer.Context) -> None:
    """Print counters in the Prometheus text exposition format."""
    settings: Settings = ctx.obj
    controller = _get_controller(ctx)
    result = _run(
        controller.stats_prometheus(namespace=settings.metrics_namespace),
        "querying prometheus stats",
    )
    typer.echo(render_metric_families(result.families), nl=False)
    _report_parse_errors(result.error, "querying prometheus stats")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
