"""
Command Context.

Per-invocation state handed from the root callback to every command through
typer's ctx.obj, plus the helpers commands share for output and errors.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import typer
from rich.markup import escape

from synse_cli.cli.client import SynseClient
from synse_cli.cli.progress import err_console
from synse_cli.cli.render import RenderRequest, render
from synse_cli.core.config import CliOverrides, EffectiveConfig, resolve_config
from synse_cli.core.exceptions import SynseError
from synse_cli.core.logging import get_logger, setup_logging
from synse_cli.devices.pipeline import QueryOutcome

logger = get_logger(__name__)

OUTPUT_HELP = "Output format: table, json or yaml."


def output_option(default: str = "table") -> Any:
    """The --output/-o/--format option shared by every reading command."""
    return typer.Option(default, "--output", "-o", "--format", help=OUTPUT_HELP)


def create_client(config: EffectiveConfig) -> SynseClient:
    """Create a client for the active host."""
    return SynseClient.from_host(config.active_host, timeout=config.timeout)


@dataclass
class CommandContext:
    """
    Everything a command needs from the root callback.

    The configuration is resolved on first use rather than in the callback,
    so `--help` on any command works even with a broken config file.
    """

    overrides: CliOverrides = field(default_factory=CliOverrides)
    _config: EffectiveConfig | None = field(default=None, init=False, repr=False)

    def resolve(self) -> EffectiveConfig:
        """
        Resolve the configuration once and cache it for this invocation.

        Raises:
            ConfigError: If the config file, environment or flags are invalid.
        """
        if self._config is None:
            config = resolve_config(self.overrides)
            # Debug may come from the environment or file rather than the flag.
            if config.debug and not self.overrides.debug:
                setup_logging(level="DEBUG")
            logger.debug(
                "Configuration resolved",
                host=config.active_host.name,
                address=config.active_host.address,
            )
            self._config = config
        return self._config

    @property
    def config(self) -> EffectiveConfig:
        return self.resolve()

    def client(self) -> SynseClient:
        return create_client(self.config)


def get_context(ctx: typer.Context) -> CommandContext:
    """
    Fetch the CommandContext installed by the root callback, with its
    configuration resolved. Configuration errors exit 1 like any other.
    """
    command = ctx.find_object(CommandContext)
    if command is None:
        raise RuntimeError("CommandContext missing: commands must run under the synse app")
    with handle_errors():
        command.resolve()
    return command


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report SynseError to stderr and exit 1."""
    try:
        yield
    except SynseError as e:
        logger.debug("Command failed", code=e.code, error=e.message)
        err_console.print(f"[red]Error:[/red] {escape(e.message)}", highlight=False)
        raise typer.Exit(1) from e


def emit(request: RenderRequest) -> None:
    """Render a request and write it to stdout."""
    typer.echo(render(request), nl=False)


def report_failures(outcome: QueryOutcome) -> None:
    """
    List failed device reads on stderr and exit 1 if there were any.

    Successful records have already been written to stdout by then.
    """
    failed = outcome.failed
    if not failed:
        return

    err_console.print(
        f"[yellow]Warning:[/yellow] {len(failed)} of {outcome.matched} device reads failed",
        highlight=False,
    )
    for item in failed:
        device = "/".join(item.record.key)
        err_console.print(f"  {escape(device)}: {escape(item.error.message)}", highlight=False)
    raise typer.Exit(1)
