"""
Host Commands.

Show the Synse Server hosts from the resolved configuration. These commands
never contact a server.
"""

import typer

from synse_cli.cli.context import emit, get_context, handle_errors, output_option
from synse_cli.cli.render import RenderRequest, parse_format, render_mapping

app = typer.Typer(help="Configured host commands", no_args_is_help=True)


@app.command("list")
def list_hosts(ctx: typer.Context, output: str = output_option()) -> None:
    """
    List configured hosts and mark the active one.

    Examples:
        synse hosts list
        synse --host lab hosts list -o yaml
    """
    config = get_context(ctx).config
    with handle_errors():
        emit(RenderRequest(
            header=("Active", "Name", "Address"),
            rows=[
                (host == config.active_host, host.name, host.address)
                for host in config.hosts
            ],
            format=parse_format(output),
        ))


@app.command("active")
def active_host(ctx: typer.Context, output: str = output_option()) -> None:
    """
    Show the host commands will talk to.

    Examples:
        synse hosts active
        SYNSE_HOST=lab synse hosts active -o json
    """
    config = get_context(ctx).config
    with handle_errors():
        typer.echo(
            render_mapping(
                {
                    "name": config.active_host.name,
                    "address": config.active_host.address,
                    "config_file": str(config.config_file) if config.config_file else None,
                },
                output,
            ),
            nl=False,
        )
