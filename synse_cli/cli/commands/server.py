"""
Server Commands.

Commands that query the active Synse Server instance itself rather than its
devices.
"""

import asyncio
from typing import Any

import typer

from synse_cli.cli.context import CommandContext, get_context, handle_errors, output_option
from synse_cli.cli.render import parse_format, render_mapping

app = typer.Typer(help="Synse Server commands", no_args_is_help=True)


async def _status(command: CommandContext) -> dict[str, Any]:
    async with command.client() as client:
        return await client.status()


async def _version(command: CommandContext) -> dict[str, Any]:
    async with command.client() as client:
        return await client.version()


@app.command()
def status(ctx: typer.Context, output: str = output_option("yaml")) -> None:
    """
    Get the status of the active host.

    Hits the server's test endpoint. A status of "ok" means Synse Server is
    up and reachable; anything else is an error with the server or with
    reaching it.

    Examples:
        synse server status
        synse --host lab server status -o json
    """
    command = get_context(ctx)
    with handle_errors():
        fmt = parse_format(output)
        typer.echo(render_mapping(asyncio.run(_status(command)), fmt), nl=False)


@app.command()
def version(ctx: typer.Context, output: str = output_option("yaml")) -> None:
    """
    Get the server and API version of the active host.
    """
    command = get_context(ctx)
    with handle_errors():
        fmt = parse_format(output)
        typer.echo(render_mapping(asyncio.run(_version(command)), fmt), nl=False)
