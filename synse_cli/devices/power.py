"""
Power Devices.

Reading and setting the state of "power" devices. Reads plug into the query
pipeline as its detail fetcher; setting state is a single action request.

Usage:
    outcome = await query(inventory, power_filter(), partial(read_power, client))
    status = await set_power(client, inventory, "rack-1", "vec", "on")
"""

import re

from pydantic import ValidationError as PydanticValidationError

from synse_cli.cli.client import SynseClient
from synse_cli.core.exceptions import TransportError, ValidationError
from synse_cli.core.logging import get_logger
from synse_cli.devices.filters import Predicate, device_filter
from synse_cli.devices.inventory import InventoryRecord, InventorySource
from synse_cli.devices.schemas import PowerDetails

logger = get_logger(__name__)

POWER_RESOURCE = "power"
POWER_DEVICE_TYPE = "power"
POWER_STATES = ("on", "off", "cycle")

# Actions that do not settle into a steady state the device can report back.
FIRE_AND_FORGET_STATES = frozenset({"cycle"})

_IDENTIFIER = re.compile(r"^[^/\s]+$")


def validate_identifier(kind: str, value: str) -> str:
    """
    Check a rack/board/device identifier is usable as a URL path segment.

    Raises:
        ValidationError: If the identifier is empty or contains '/' or whitespace.
    """
    if not value or not _IDENTIFIER.match(value):
        raise ValidationError(
            f"Invalid {kind} id: {value!r}",
            details={kind: value},
        )
    return value


def validate_power_state(state: str) -> str:
    """
    Normalize and check a requested power state.

    Raises:
        ValidationError: If the state is not one of on, off, cycle.
    """
    normalized = state.strip().lower()
    if normalized not in POWER_STATES:
        raise ValidationError(
            f"Invalid power state: {state!r} (choose {', '.join(POWER_STATES)})",
            details={"state": state},
        )
    return normalized


def power_filter(rack_id: str | None = None, board_id: str | None = None) -> Predicate:
    """Predicate matching power devices, optionally on one rack/board."""
    return device_filter(device_type=POWER_DEVICE_TYPE, rack_id=rack_id, board_id=board_id)


def _parse_power(payload: object, source: str) -> PowerDetails:
    try:
        return PowerDetails.model_validate(payload)
    except PydanticValidationError as e:
        raise TransportError(f"Unexpected power response for {source}: {e.error_count()} invalid field(s)") from e


async def read_power(client: SynseClient, record: InventoryRecord) -> PowerDetails:
    """
    Read the power state of one device.

    Raises:
        TransportError: If the host is unreachable or the body is not a power reading
        RequestError: If the host answers with a non-2xx status
    """
    payload = await client.read_device(POWER_RESOURCE, *record.key)
    return _parse_power(payload, "/".join(record.key))


async def find_power_device(inventory: InventorySource, rack_id: str, board_id: str) -> InventoryRecord:
    """
    Locate the power device on a board.

    Raises:
        ValidationError: If the board does not exist or has no power device.
    """
    records = await inventory.list_devices()
    on_board = [r for r in records if r.rack_id == rack_id and r.board_id == board_id]
    if not on_board:
        raise ValidationError(
            f"Board {rack_id}/{board_id} not found",
            details={"rack": rack_id, "board": board_id},
        )

    for record in on_board:
        if record.device_type.lower() == POWER_DEVICE_TYPE:
            return record

    raise ValidationError(
        f"Board {rack_id}/{board_id} has no power device",
        details={"rack": rack_id, "board": board_id},
    )


async def set_power(
    client: SynseClient,
    inventory: InventorySource,
    rack_id: str,
    board_id: str,
    state: str,
    device_id: str | None = None,
) -> str:
    """
    Set the power state of a board's power device.

    Args:
        client: Client for the active host.
        inventory: Used to locate the power device when device_id is omitted.
        rack_id: Rack identifier.
        board_id: Board identifier.
        state: One of on, off, cycle.
        device_id: Power device id. Looked up from the inventory when omitted.

    Returns:
        The power status reported by the device. For "cycle" this is always
        "cycle": the action does not settle, so a 2xx response is the success
        signal and the reported status is not compared.

    Raises:
        ValidationError: On malformed ids, an unknown state, or a missing board
        RequestError: If the host answers with a non-2xx status
        TransportError: If the host is unreachable
    """
    validate_identifier("rack", rack_id)
    validate_identifier("board", board_id)
    desired = validate_power_state(state)

    if device_id is None:
        device_id = (await find_power_device(inventory, rack_id, board_id)).device_id
    else:
        validate_identifier("device", device_id)

    target = f"{rack_id}/{board_id}/{device_id}"
    logger.info("Setting power state", device=target, state=desired)

    response = await client.device_action(POWER_RESOURCE, rack_id, board_id, device_id, desired)

    if desired in FIRE_AND_FORGET_STATES:
        logger.debug(
            "Power action accepted",
            device=target,
            state=desired,
            status_code=response.status_code,
            response=response.text,
        )
        return desired

    return _parse_power(client.decode_json(response), target).power_status
