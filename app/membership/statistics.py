"""
Attendance statistics.

Pure projections over ledger rows.  Nothing here is stored: every call
recomputes from the records it is given, so the numbers can never drift from
the ledger.

- ``total_attendance``: records with status ``present``,
- ``monthly_attendance``: ``present`` records whose session falls in the
  current calendar month,
- ``attendance_rate``: present / all records * 100, one decimal, clamped to
  [0, 100], 0 when there are no records.
"""

from __future__ import annotations

import datetime
from typing import Iterable

from app.models.attendance import AttendanceStatus
from app.schemas.attendance import AttendanceStats


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def attendance_rate(present: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return _clamp(round(present / total * 100, 1))


def compute_attendance_stats(records: Iterable[tuple[str, datetime.date]], today: datetime.date, ) -> AttendanceStats:
    """Compute stats from ``(status, session_date)`` pairs."""
    total = 0
    present = 0
    monthly = 0
    for status, session_date in records:
        total += 1
        if status != AttendanceStatus.present:
            continue
        present += 1
        if session_date is not None and (session_date.year, session_date.month) == (today.year, today.month):
            monthly += 1

    return AttendanceStats(total_records=total, total_attendance=present, monthly_attendance=monthly,
                           attendance_rate=attendance_rate(present, total), )
