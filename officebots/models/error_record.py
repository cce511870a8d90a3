from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per failed job invocation. The key set is fixed
(timestamp, job, error_type, message) so downstream alerting can rely on it.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        job: job name (``bug-hunter`` or ``invoice``)
        error_type: error classification in UPPER_SNAKE_CASE format
        message: human readable description
    """
    timestamp: str  # ISO8601 UTC
    job: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(job: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            job=job,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line without extra keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
