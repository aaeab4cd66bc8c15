"""
Output Rendering.

Turns command results into text in the format the operator asked for.
Rendering is deterministic: the same request always produces the same bytes.
There is no colour, no terminal-width detection and no locale-dependent
formatting.

Formats:
    table - rich table, columns in header order, one line per row.
            Repeated values in adjacent rows (same rack, same board) are
            printed in full, never merged. The table grows to fit its
            widest row; cells are never truncated.
    json  - list of objects keyed by the request's keys, indent 2.
    yaml  - the same list of objects as YAML, keys in header order.

Cell values:
    float - fixed two decimals ("%.2f") in every format
    bool  - true/false text in tables, native booleans in JSON/YAML
    None  - empty cell in tables, null in JSON/YAML

Usage:
    text = render(RenderRequest(
        header=("Rack", "Board", "Input Power"),
        rows=[("rack-1", "vec", 12.5)],
        format="json",
    ))
"""

import io
import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import yaml
from rich import box
from rich.cells import cell_len
from rich.console import Console
from rich.table import Table
from rich.text import Text

from synse_cli.core.exceptions import FormatError

TABLE_WIDTH = 400


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def parse_format(value: "OutputFormat | str") -> OutputFormat:
    """
    Resolve a format name (case-insensitive).

    Raises:
        FormatError: If the name is not table, json or yaml.
    """
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat(str(value).strip().lower())
    except ValueError:
        raise FormatError(str(value)) from None


def header_key(title: str) -> str:
    """Derive a JSON/YAML field name from a column title ("Power Ok?" -> "power_ok")."""
    return re.sub(r"[^a-z0-9]+", "_", title.lower()).strip("_")


@dataclass(frozen=True)
class RenderRequest:
    """
    Tabular data plus the format to render it in.

    Every row must have exactly one value per header column. `keys` maps the
    columns to JSON/YAML field names; it defaults to header_key() of each title.
    """

    header: Sequence[str]
    rows: Sequence[Sequence[Any]]
    format: OutputFormat | str = OutputFormat.TABLE
    keys: Sequence[str] | None = None

    def __post_init__(self) -> None:
        header = tuple(self.header)
        rows = tuple(tuple(row) for row in self.rows)
        keys = tuple(self.keys) if self.keys is not None else tuple(header_key(h) for h in header)

        if len(keys) != len(header):
            raise ValueError(f"{len(keys)} keys given for {len(header)} columns")
        for index, row in enumerate(rows):
            if len(row) != len(header):
                raise ValueError(
                    f"Row {index} has {len(row)} values, header has {len(header)} columns"
                )

        object.__setattr__(self, "header", header)
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "keys", keys)

    def records(self) -> list[dict[str, Any]]:
        """Rows as key → value mappings, for structured formats."""
        return [
            {key: _data_value(value) for key, value in zip(self.keys, row)}
            for row in self.rows
        ]


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _data_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _table_width(header: Sequence[str], cells: Sequence[Sequence[str]]) -> int:
    """Console width that fits every column at its widest cell, never below TABLE_WIDTH."""
    natural = 0
    for index, title in enumerate(header):
        widest = max([cell_len(title)] + [cell_len(row[index]) for row in cells])
        # Cell padding on both sides plus the column divider.
        natural += widest + 3
    return max(TABLE_WIDTH, natural)


def _render_table(header: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    cells = [[_cell_text(value) for value in row] for row in rows]

    table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
    for title in header:
        table.add_column(Text(title), no_wrap=True)
    for row in cells:
        table.add_row(*(Text(cell) for cell in row))

    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=_table_width(header, cells),
        color_system=None,
        force_terminal=False,
        no_color=True,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=False,
    )
    console.print(table)
    return "".join(f"{line.rstrip()}\n" for line in buffer.getvalue().splitlines())


def _dump(records: Any, fmt: OutputFormat) -> str:
    if fmt is OutputFormat.JSON:
        return json.dumps(records, indent=2) + "\n"
    return yaml.safe_dump(records, sort_keys=False, default_flow_style=False, allow_unicode=True)


def render(request: RenderRequest) -> str:
    """
    Render a request in its format.

    Raises:
        FormatError: If the requested format is not supported.
    """
    fmt = parse_format(request.format)
    if fmt is OutputFormat.TABLE:
        return _render_table(request.header, request.rows)
    return _dump(request.records(), fmt)


def _flatten(data: Mapping[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    items: list[tuple[str, Any]] = []
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            items.extend(_flatten(value, prefix=f"{name}."))
        else:
            items.append((name, value))
    return items


def render_mapping(data: Mapping[str, Any], format: OutputFormat | str) -> str:
    """
    Render a single document, such as a server status response.

    Structured formats dump the document as-is. The table format lists one
    Field/Value row per leaf, nested keys joined with dots.

    Raises:
        FormatError: If the requested format is not supported.
    """
    fmt = parse_format(format)
    if fmt is OutputFormat.TABLE:
        return _render_table(("Field", "Value"), _flatten(data))
    return _dump(dict(data), fmt)
