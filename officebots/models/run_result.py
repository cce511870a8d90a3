from __future__ import annotations

from dataclasses import dataclass

"""Per-invocation result used for the SUMMARY line."""


@dataclass(frozen=True)
class RunResult:
    """What one job invocation did."""
    job: str  # bug-hunter / invoice
    posted_messages: int = 0
    group_updates: int = 0
    skipped_reason: str | None = None  # e.g. "weekend", "dry-run"
    detail: str | None = None  # free text (invoice number, file path, ...)
