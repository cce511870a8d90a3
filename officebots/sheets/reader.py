from __future__ import annotations

import math
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils import column_index_from_string

from officebots.models.roster import Assignment, RosterEntry

"""Roster sheet reader and rotation parser.

Layout of the roster sheet:
- row 0 is the header, data rows start at index 1
- the identifier column of the first data row holds today's assignee
  (Slack member ID)
- the next-assignee column lists the rotation top to bottom; the first
  blank cell ends it
"""

__all__ = [
    "MalformedRosterError",
    "column_index",
    "read_roster_rows",
    "to_entries",
    "parse_roster",
]


class MalformedRosterError(Exception):
    """Raised when the roster lacks expected rows/columns or the assignee."""


def column_index(column: int | str) -> int:
    """Zero-based column index from an int or a spreadsheet letter ("O" -> 14)."""
    if isinstance(column, bool):
        raise MalformedRosterError(f"invalid column: {column!r}")
    if isinstance(column, int):
        if column < 0:
            raise MalformedRosterError(f"invalid column: {column}")
        return column
    letters = str(column).strip().upper()
    try:
        return column_index_from_string(letters) - 1
    except ValueError as e:
        raise MalformedRosterError(f"invalid column: {column!r}") from e


def read_roster_rows(path: Path, sheet_name: str | None = None) -> list[list[Any]]:
    """Read a snapshot of the roster sheet as raw rows (header included).

    Parameters
    ----------
    path: roster workbook (.xlsx) or .csv file
    sheet_name: sheet to read (None = first sheet)
    """
    if not path.exists():
        raise MalformedRosterError(f"roster file not found: {path}")
    try:
        if path.suffix.lower() == ".csv":
            df = pd.read_csv(path, header=None, dtype=object, keep_default_na=False)
        else:
            # ヘッダなしで生読み (row 0 = header として後段で扱う)
            df = pd.read_excel(path, sheet_name=sheet_name or 0, header=None, dtype=object)
    except ValueError as e:
        # pandas raises ValueError for unknown sheet names
        raise MalformedRosterError(f"cannot read roster {path}: {e}") from e
    return df.values.tolist()


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _cell(row: Sequence[Any], index: int, row_number: int) -> str:
    if index >= len(row):
        raise MalformedRosterError(
            f"row {row_number} has {len(row)} columns, column {index} requested"
        )
    return _cell_text(row[index])


def to_entries(
    rows: Sequence[Sequence[Any]],
    identifier_column: int | str,
    next_assignee_column: int | str,
) -> list[RosterEntry]:
    """Convert raw data rows (rows[1:]) into named records."""
    id_idx = column_index(identifier_column)
    next_idx = column_index(next_assignee_column)
    entries: list[RosterEntry] = []
    for i in range(1, len(rows)):
        row = rows[i]
        entries.append(
            RosterEntry(
                row_number=i,
                assignee_id=_cell(row, id_idx, i),
                next_assignee=_cell(row, next_idx, i),
            )
        )
    return entries


def parse_roster(
    rows: Sequence[Sequence[Any]],
    identifier_column: int | str,
    next_assignee_column: int | str,
) -> Assignment:
    """Derive today's assignment from a roster snapshot.

    The current assignee comes from the identifier column of the first data
    row. The upcoming rotation is read from the next-assignee column of every
    data row in order, stopping at (and excluding) the first blank cell.
    """
    if len(rows) < 2:
        raise MalformedRosterError(
            f"roster needs a header and at least one data row, got {len(rows)} rows"
        )

    entries = to_entries(rows, identifier_column, next_assignee_column)

    current = entries[0].assignee_id
    if current == "":
        raise MalformedRosterError(
            f"assignee identifier missing in row 1, column {column_index(identifier_column)}"
        )

    upcoming: list[str] = []
    for entry in entries:
        if entry.next_assignee == "":
            break
        upcoming.append(entry.next_assignee)

    return Assignment(current_assignee=current, upcoming=tuple(upcoming))
