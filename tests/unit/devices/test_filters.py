"""Unit tests for inventory predicates."""

import pytest

from synse_cli.devices.filters import (
    all_of,
    any_of,
    by_board,
    by_device,
    by_rack,
    by_type,
    device_filter,
    match_all,
    negate,
)
from synse_cli.devices.inventory import InventoryRecord, flatten_scan
from synse_cli.devices.schemas import ScanResponse


@pytest.fixture
def records(scan_payload) -> tuple[InventoryRecord, ...]:
    return flatten_scan(ScanResponse.model_validate(scan_payload))


def _ids(records, predicate) -> list[str]:
    return [r.device_id for r in records if predicate(r)]


class TestPrimitivePredicates:

    def test_match_all(self, records):
        assert _ids(records, match_all) == ["0001", "0002", "0003", "0004", "0005"]

    def test_by_type_case_insensitive(self, records):
        assert _ids(records, by_type("POWER")) == ["0001", "0003", "0004"]

    def test_by_rack(self, records):
        assert _ids(records, by_rack("rack-2")) == ["0004", "0005"]

    def test_by_board_spans_racks(self, records):
        """Should match a board id in every rack."""
        assert _ids(records, by_board("vec")) == ["0001", "0002", "0004", "0005"]

    def test_by_device(self, records):
        assert _ids(records, by_device("0003")) == ["0003"]


class TestCombinators:

    def test_all_of(self, records):
        assert _ids(records, all_of(by_type("power"), by_rack("rack-1"))) == ["0001", "0003"]

    def test_all_of_empty_matches_everything(self, records):
        assert len(_ids(records, all_of())) == 5

    def test_any_of(self, records):
        assert _ids(records, any_of(by_type("fan_speed"), by_device("0002"))) == ["0002", "0005"]

    def test_negate(self, records):
        assert _ids(records, negate(by_type("power"))) == ["0002", "0005"]


class TestDeviceFilter:

    def test_no_criteria(self, records):
        assert device_filter() is match_all

    def test_type_rack_board(self, records):
        predicate = device_filter(device_type="power", rack_id="rack-1", board_id="vec")

        assert _ids(records, predicate) == ["0001"]

    def test_device_id(self, records):
        assert _ids(records, device_filter(device_id="0005")) == ["0005"]

    def test_no_match(self, records):
        assert _ids(records, device_filter(rack_id="rack-9")) == []

    def test_sound_and_complete(self, records):
        """Every record satisfying all criteria is kept, and nothing else."""
        predicate = device_filter(device_type="power", board_id="vec")

        kept = [r for r in records if predicate(r)]
        expected = [r for r in records if r.device_type == "power" and r.board_id == "vec"]
        assert kept == expected
