"""Monthly target-date sequences."""

from __future__ import annotations

from datetime import date
from typing import List


def month_sequence(start: date, end: date) -> List[date]:
    """Return the first day of every month from *start* to *end*, inclusive.

    ``start`` is snapped back to the first of its month, so
    ``month_sequence(date(2019, 1, 15), date(2019, 3, 1))`` gives Jan 1,
    Feb 1 and Mar 1.  An *end* before *start* gives an empty list.
    """
    current = date(start.year, start.month, 1)
    months: List[date] = []
    while current <= end:
        months.append(current)
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return months
