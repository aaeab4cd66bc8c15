"""
Device Inventory Commands.
"""

import asyncio

import typer

from synse_cli.cli.context import CommandContext, emit, get_context, handle_errors, output_option
from synse_cli.cli.render import RenderRequest, parse_format
from synse_cli.devices.filters import Predicate, device_filter
from synse_cli.devices.inventory import InventoryRecord, ScanInventory

app = typer.Typer(help="Device inventory commands", no_args_is_help=True)

HEADER = ("Rack", "Board", "Device", "Type", "Name")


async def _list_devices(command: CommandContext, predicate: Predicate) -> list[InventoryRecord]:
    async with command.client() as client:
        records = await ScanInventory(client).list_devices()
    return [record for record in records if predicate(record)]


@app.command("list")
def list_devices(
    ctx: typer.Context,
    device_type: str | None = typer.Option(None, "--type", "-t", help="Only devices of this type"),
    rack: str | None = typer.Option(None, "--rack", "-r", help="Only devices in this rack"),
    board: str | None = typer.Option(None, "--board", "-b", help="Only devices on this board"),
    output: str = output_option(),
) -> None:
    """
    List the devices known to the active host.

    Examples:
        synse devices list
        synse devices list --type temperature --rack rack-1 -o json
    """
    command = get_context(ctx)
    with handle_errors():
        fmt = parse_format(output)
        predicate = device_filter(device_type=device_type, rack_id=rack, board_id=board)
        records = asyncio.run(_list_devices(command, predicate))
        emit(RenderRequest(
            header=HEADER,
            rows=[
                (r.rack_id, r.board_id, r.device_id, r.device_type, r.device_info)
                for r in records
            ],
            format=fmt,
        ))
