"""
Device Inventory.

Enumerates every device known to the active Synse Server. Each call to
list_devices() issues one fresh scan request; results are never cached, so a
host that cannot be reached is reported instead of served from stale data.

Usage:
    inventory = ScanInventory(client)
    for record in await inventory.list_devices():
        print(record.rack_id, record.board_id, record.device_id)
"""

from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from synse_cli.cli.client import SynseClient
from synse_cli.core.exceptions import TransportError
from synse_cli.core.logging import get_logger
from synse_cli.devices.schemas import ScanResponse

logger = get_logger(__name__)


@dataclass(frozen=True)
class InventoryRecord:
    """
    One addressable device.

    Attributes:
        rack_id: Rack identifier.
        board_id: Board identifier, unique within its rack.
        device_id: Device identifier, unique within its board.
        device_type: Device type (power, temperature, fan_speed, ...).
        device_info: Human-readable device name.
    """

    rack_id: str
    board_id: str
    device_id: str
    device_type: str
    device_info: str

    @property
    def key(self) -> tuple[str, str, str]:
        """The (rack, board, device) triple that identifies this device."""
        return (self.rack_id, self.board_id, self.device_id)


class InventorySource(Protocol):
    """Anything that can list the device inventory."""

    async def list_devices(self) -> tuple[InventoryRecord, ...]: ...


def flatten_scan(scan: ScanResponse) -> tuple[InventoryRecord, ...]:
    """Flatten a scan into records, in rack → board → device order."""
    return tuple(
        InventoryRecord(
            rack_id=rack.id,
            board_id=board.id,
            device_id=device.id,
            device_type=device.type,
            device_info=device.info,
        )
        for rack in scan.racks
        for board in rack.boards
        for device in board.devices
    )


class ScanInventory:
    """Inventory backed by the Synse Server scan route."""

    def __init__(self, client: SynseClient) -> None:
        self._client = client

    async def list_devices(self) -> tuple[InventoryRecord, ...]:
        """
        Scan the active host and return every device.

        Raises:
            TransportError: If the host is unreachable or the body is not a scan
            RequestError: If the host answers with a non-2xx status
        """
        payload = await self._client.scan()
        try:
            scan = ScanResponse.model_validate(payload)
        except PydanticValidationError as e:
            raise TransportError(
                f"Unexpected scan response from {self._client.base_url}: {e.error_count()} invalid field(s)",
                url=self._client.base_url,
            ) from e

        records = flatten_scan(scan)
        logger.debug("Scan complete", racks=len(scan.racks), devices=len(records))
        return records
