"""
Device Query Pipeline.

Filters the inventory with a predicate, reads per-device detail for every
match, and merges each detail with its inventory record.

Steps:
    1. List the inventory once and keep the records the predicate accepts,
       in inventory order.
    2. Call fetch_detail(record) for each match, at most `workers` at a time,
       each call bounded by a `timeout` second deadline.
    3. Report progress after every completed call, failed or not.
    4. Return one result per match, in inventory order: an AggregatedRecord
       on success, a FailedRecord when the read raised a SynseError or ran
       out of time.

Only the inventory listing can fail the whole query. A query that matches
nothing returns an empty outcome.

Usage:
    outcome = await query(
        ScanInventory(client),
        device_filter(device_type="power"),
        lambda record: read_power(client, record),
        on_progress=lambda done, total: bar.update(task, completed=done),
    )
    for item in outcome.succeeded:
        print(item.record.device_info, item.detail.power_ok)
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from typing import Generic, TypeVar

from synse_cli.core.concurrency import gather_bounded, run_with_deadline
from synse_cli.core.config_schema import DEFAULT_TIMEOUT, DEFAULT_WORKERS
from synse_cli.core.exceptions import SynseError, TransportError
from synse_cli.core.logging import get_logger
from synse_cli.devices.filters import Predicate
from synse_cli.devices.inventory import InventoryRecord, InventorySource

logger = get_logger(__name__)

DetailT = TypeVar("DetailT")

DetailFetcher = Callable[[InventoryRecord], Awaitable[DetailT]]
ProgressSink = Callable[[int, int], None]


@dataclass(frozen=True)
class AggregatedRecord(Generic[DetailT]):
    """An inventory record merged with the detail read for it."""

    record: InventoryRecord
    detail: DetailT


@dataclass(frozen=True)
class FailedRecord:
    """An inventory record whose detail read failed."""

    record: InventoryRecord
    error: SynseError


QueryResult = AggregatedRecord[DetailT] | FailedRecord


@dataclass(frozen=True)
class QueryOutcome(Generic[DetailT]):
    """
    Results of one pipeline run, in inventory order.

    Attributes:
        results: One entry per matching record.
        inventory_size: Number of records the inventory listed before filtering.
    """

    results: tuple[QueryResult[DetailT], ...]
    inventory_size: int = 0

    @property
    def matched(self) -> int:
        """Number of records that satisfied the predicate."""
        return len(self.results)

    @property
    def succeeded(self) -> list[AggregatedRecord[DetailT]]:
        """Records whose detail was read."""
        return [r for r in self.results if isinstance(r, AggregatedRecord)]

    @property
    def failed(self) -> list[FailedRecord]:
        """Records whose detail read failed."""
        return [r for r in self.results if isinstance(r, FailedRecord)]


async def query(
    inventory: InventorySource,
    predicate: Predicate,
    fetch_detail: DetailFetcher[DetailT],
    *,
    workers: int = DEFAULT_WORKERS,
    timeout: float | None = DEFAULT_TIMEOUT,
    on_progress: ProgressSink | None = None,
) -> QueryOutcome[DetailT]:
    """
    Run the query pipeline.

    Args:
        inventory: Source of inventory records.
        predicate: Records to keep.
        fetch_detail: Async callback reading one device's detail.
        workers: Maximum number of concurrent detail reads.
        timeout: Deadline in seconds for each detail read (None for no limit).
        on_progress: Called with (completed, total) after each read finishes.

    Returns:
        QueryOutcome with one result per matching record.

    Raises:
        TransportError, RequestError: If the inventory cannot be listed
        ValueError: If workers is less than 1
    """
    records = await inventory.list_devices()
    matched = [record for record in records if predicate(record)]
    total = len(matched)

    logger.debug("Inventory filtered", inventory=len(records), matched=total)

    if not matched:
        return QueryOutcome(results=(), inventory_size=len(records))

    completed = 0

    async def _read(record: InventoryRecord) -> QueryResult[DetailT]:
        nonlocal completed
        path = "/".join(record.key)
        try:
            detail = await run_with_deadline(partial(fetch_detail, record), timeout)
            result: QueryResult[DetailT] = AggregatedRecord(record=record, detail=detail)
        except TimeoutError:
            logger.warning("Detail read timed out", device=path, timeout=timeout)
            result = FailedRecord(
                record=record,
                error=TransportError(f"Timed out after {timeout}s reading {path}"),
            )
        except SynseError as e:
            logger.warning("Detail read failed", device=path, error=e.message)
            result = FailedRecord(record=record, error=e)

        # No await between the increment and the callback: the event loop
        # cannot interleave another read's update here.
        completed += 1
        if on_progress is not None:
            on_progress(completed, total)
        return result

    results = await gather_bounded([partial(_read, record) for record in matched], limit=workers)
    outcome = QueryOutcome(results=tuple(results), inventory_size=len(records))

    logger.debug(
        "Query complete",
        matched=total,
        succeeded=len(outcome.succeeded),
        failed=len(outcome.failed),
    )
    return outcome
