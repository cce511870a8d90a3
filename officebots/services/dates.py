from __future__ import annotations

from datetime import date, datetime, timedelta

"""Calendar helpers shared by the bug hunter job and the invoice helper."""

__all__ = [
    "end_of_month",
    "period_code",
    "is_workday",
]

SATURDAY = 5
SUNDAY = 6


def _as_date(reference: date | datetime) -> date:
    # datetime is a subclass of date; drop the time of day
    if isinstance(reference, datetime):
        return reference.date()
    return reference


def end_of_month(reference: date | datetime) -> date:
    """Return the last day of ``reference``'s month.

    Computed as the day before the first day of the following month, so
    leap years come for free and December stays in the same year.

    >>> end_of_month(date(2024, 2, 10))
    datetime.date(2024, 2, 29)
    >>> end_of_month(date(2023, 12, 1))
    datetime.date(2023, 12, 31)
    """
    d = _as_date(reference)
    if d.month == 12:
        first_of_next = date(d.year + 1, 1, 1)
    else:
        first_of_next = date(d.year, d.month + 1, 1)
    return first_of_next - timedelta(days=1)


def period_code(reference: date | datetime) -> str:
    """Return the ``YYYY-NNN`` invoice number for ``reference``.

    The month is zero padded to three digits (``1961-008``); existing
    invoice sheets are named this way.
    """
    d = _as_date(reference)
    return f"{d.year}-{d.month:03d}"


def is_workday(reference: date | datetime) -> bool:
    """False on Saturday and Sunday."""
    return _as_date(reference).weekday() not in (SATURDAY, SUNDAY)
