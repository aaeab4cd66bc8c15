"""
Inventory Filters.

Predicates over InventoryRecord, composed per command. A predicate is any
callable taking a record and returning a bool.

Usage:
    predicate = all_of(by_type("power"), by_rack("rack-1"))
    predicate = device_filter(device_type="power", rack_id="rack-1", board_id="vec")
"""

from collections.abc import Callable

from synse_cli.devices.inventory import InventoryRecord

Predicate = Callable[[InventoryRecord], bool]


def match_all(record: InventoryRecord) -> bool:
    """Predicate that accepts every record."""
    return True


def by_type(device_type: str) -> Predicate:
    """Match records of one device type (case-insensitive)."""
    wanted = device_type.lower()
    return lambda record: record.device_type.lower() == wanted


def by_rack(rack_id: str) -> Predicate:
    """Match records in one rack."""
    return lambda record: record.rack_id == rack_id


def by_board(board_id: str) -> Predicate:
    """Match records on one board (in any rack)."""
    return lambda record: record.board_id == board_id


def by_device(device_id: str) -> Predicate:
    """Match records with one device id."""
    return lambda record: record.device_id == device_id


def all_of(*predicates: Predicate) -> Predicate:
    """Match records accepted by every predicate. No predicates matches all."""
    return lambda record: all(predicate(record) for predicate in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    """Match records accepted by at least one predicate."""
    return lambda record: any(predicate(record) for predicate in predicates)


def negate(predicate: Predicate) -> Predicate:
    """Match records the predicate rejects."""
    return lambda record: not predicate(record)


def device_filter(
    device_type: str | None = None,
    rack_id: str | None = None,
    board_id: str | None = None,
    device_id: str | None = None,
) -> Predicate:
    """Build the conjunction of the given criteria. Unset criteria are ignored."""
    predicates: list[Predicate] = []
    if device_type:
        predicates.append(by_type(device_type))
    if rack_id:
        predicates.append(by_rack(rack_id))
    if board_id:
        predicates.append(by_board(board_id))
    if device_id:
        predicates.append(by_device(device_id))
    return all_of(*predicates) if predicates else match_all
