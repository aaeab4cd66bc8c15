"""
Synse CLI Application.

Root Typer app. The callback collects the global flags and hands them to the
selected command through ctx.obj, which resolves configuration on first use.

Usage:
    synse --help

    # Devices
    synse devices list --type power
    synse power list -o json
    synse power get rack-1 vec
    synse power set rack-1 vec cycle

    # Hosts and servers
    synse hosts list
    synse --host lab server status

Options:
    --debug, -d       Enable debug mode (DEBUG level logging)
    --verbose, -v     Enable verbose output (INFO level logging)
    --host, -H        Name of the configured host to target
    --timeout         Per-request timeout in seconds
    --workers         Maximum concurrent device reads
"""

import structlog
import typer

from synse_cli.cli.commands import devices_app, hosts_app, power_app, server_app
from synse_cli.cli.context import CommandContext
from synse_cli.core.config import CliOverrides
from synse_cli.core.logging import get_logger, setup_logging

app = typer.Typer(
    name="synse",
    help="Synse Server CLI - device inventory, device state, and power control.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(devices_app, name="devices")
app.add_typer(power_app, name="power")
app.add_typer(hosts_app, name="hosts")
app.add_typer(server_app, name="server")


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging). Env: SYNSE_DEBUG",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="Name of the configured host to target. Env: SYNSE_HOST",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        min=0.001,
        help="Per-request timeout in seconds. Env: SYNSE_TIMEOUT",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        min=1,
        help="Maximum concurrent device reads. Env: SYNSE_WORKERS",
    ),
) -> None:
    """
    Synse Server CLI.

    Configuration is read from .synse.yaml in the working directory or the
    home directory, overridden by SYNSE_* environment variables, overridden
    by flags. It is resolved when a command first needs it.
    """
    setup_logging(level="DEBUG" if debug else "INFO" if verbose else "WARNING")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)

    # The flag can only switch debug on; leaving it off defers to env and file.
    overrides = CliOverrides(
        debug=True if debug else None,
        host=host,
        timeout=timeout,
        workers=workers,
    )

    logger.debug("CLI invoked", command=ctx.invoked_subcommand)
    ctx.obj = CommandContext(overrides=overrides)


if __name__ == "__main__":
    app()
