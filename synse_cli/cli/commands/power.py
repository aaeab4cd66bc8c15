"""
Power Commands.

Commands for reading and setting the state of power devices.
"""

import asyncio
from functools import partial

import typer

from synse_cli.cli.context import (
    CommandContext,
    emit,
    get_context,
    handle_errors,
    output_option,
    report_failures,
)
from synse_cli.cli.progress import ProgressReporter
from synse_cli.cli.render import RenderRequest, parse_format
from synse_cli.devices.filters import Predicate
from synse_cli.devices.inventory import ScanInventory
from synse_cli.devices.pipeline import QueryOutcome, query
from synse_cli.devices.power import (
    POWER_STATES,
    PowerDetails,
    power_filter,
    read_power,
    set_power,
    validate_identifier,
)

app = typer.Typer(help="Power device commands", no_args_is_help=True)

LIST_HEADER = ("Rack", "Board", "Name", "Input Power", "Power Ok?")
GET_HEADER = (
    "Rack",
    "Board",
    "Device",
    "Name",
    "Input Power",
    "Over Current?",
    "Power Ok?",
    "Power Status",
)


async def _query_power(command: CommandContext, predicate: Predicate) -> QueryOutcome[PowerDetails]:
    async with command.client() as client:
        with ProgressReporter("Reading power devices") as progress:
            return await query(
                ScanInventory(client),
                predicate,
                partial(read_power, client),
                workers=command.config.workers,
                timeout=command.config.timeout,
                on_progress=progress,
            )


@app.command("list")
def list_power(ctx: typer.Context, output: str = output_option()) -> None:
    """
    List input power and power status for every power device.

    Rows are grouped by rack, then board. Repeated rack and board values
    are printed on every row.

    Examples:
        synse power list
        synse power list -o json
    """
    command = get_context(ctx)
    with handle_errors():
        fmt = parse_format(output)
        outcome = asyncio.run(_query_power(command, power_filter()))
        emit(RenderRequest(
            header=LIST_HEADER,
            rows=[
                (
                    item.record.rack_id,
                    item.record.board_id,
                    item.record.device_info,
                    item.detail.input_power,
                    item.detail.power_ok,
                )
                for item in outcome.succeeded
            ],
            format=fmt,
        ))
    report_failures(outcome)


@app.command("get")
def get_power(
    ctx: typer.Context,
    rack: str = typer.Argument(..., help="Rack id"),
    board: str = typer.Argument(..., help="Board id"),
    output: str = output_option(),
) -> None:
    """
    Show full power state for the power devices on one board.

    Examples:
        synse power get rack-1 vec
        synse power get rack-1 vec -o yaml
    """
    command = get_context(ctx)
    with handle_errors():
        fmt = parse_format(output)
        validate_identifier("rack", rack)
        validate_identifier("board", board)
        outcome = asyncio.run(_query_power(command, power_filter(rack_id=rack, board_id=board)))
        emit(RenderRequest(
            header=GET_HEADER,
            rows=[
                (
                    item.record.rack_id,
                    item.record.board_id,
                    item.record.device_id,
                    item.record.device_info,
                    item.detail.input_power,
                    item.detail.over_current,
                    item.detail.power_ok,
                    item.detail.power_status,
                )
                for item in outcome.succeeded
            ],
            format=fmt,
        ))
    report_failures(outcome)


async def _set_power(
    command: CommandContext,
    rack: str,
    board: str,
    state: str,
    device: str | None,
) -> str:
    async with command.client() as client:
        return await set_power(client, ScanInventory(client), rack, board, state, device_id=device)


@app.command("set")
def set_power_state(
    ctx: typer.Context,
    rack: str = typer.Argument(..., help="Rack id"),
    board: str = typer.Argument(..., help="Board id"),
    state: str = typer.Argument(..., help=f"Desired state: {', '.join(POWER_STATES)}"),
    device: str | None = typer.Option(
        None,
        "--device",
        help="Power device id. Looked up from the board when omitted.",
    ),
) -> None:
    """
    Set the power state of a board: on, off or cycle.

    Examples:
        synse power set rack-1 vec on
        synse power set rack-1 vec cycle --device 2000000000000001
    """
    command = get_context(ctx)
    with handle_errors():
        status = asyncio.run(_set_power(command, rack, board, state, device))

    if status == "cycle":
        typer.echo(f"Power successfully {status}d")
    else:
        typer.echo(f"Power set to {status}")
