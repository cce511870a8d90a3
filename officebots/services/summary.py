from __future__ import annotations

from ..models.run_result import RunResult

"""SUMMARY line rendering.

Format:
SUMMARY job={job} posted={n} assigned={m} skipped={reason|none}[ detail={detail}]
"""


def render_summary_line(result: RunResult) -> str:
    """Render the SUMMARY line for one job invocation.

    Examples:
        >>> render_summary_line(RunResult(job="bug-hunter", skipped_reason="weekend"))
        'SUMMARY job=bug-hunter posted=0 assigned=0 skipped=weekend'
    """
    line = (
        f"SUMMARY job={result.job} "
        f"posted={result.posted_messages} "
        f"assigned={result.group_updates} "
        f"skipped={result.skipped_reason or 'none'}"
    )
    if result.detail:
        line += f" detail={result.detail}"
    return line
