from __future__ import annotations

from dataclasses import dataclass

"""Roster domain models.

RosterEntry is the named record produced for each data row of the roster
sheet; Assignment is derived from the entries on every run and never stored.
"""

__all__ = [
    "RosterEntry",
    "Assignment",
]


@dataclass(frozen=True)
class RosterEntry:
    """One data row of the roster after column extraction.

    row_number is the zero-based index into the raw rows (1 = first data row,
    row 0 being the header).
    """
    row_number: int
    assignee_id: str  # trimmed, may be "" below the first data row
    next_assignee: str  # trimmed, "" marks the end of the rotation


@dataclass(frozen=True)
class Assignment:
    """Today's bug hunter and the people lined up after them."""
    current_assignee: str
    upcoming: tuple[str, ...] = ()
