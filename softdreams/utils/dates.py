"""Date helpers shared by models and services.

Services take an injectable ``clock`` so tests can pin "now".
"""

from collections.abc import Callable
from datetime import date, datetime
from typing import TypeAlias

Clock: TypeAlias = Callable[[], datetime]


def system_clock() -> datetime:
    """Return the current local time."""
    return datetime.now()


def months_between(start: date, end: date) -> int:
    """Count whole calendar months from *start* to *end*.

    A month only counts once the day of month has been reached, so
    2024-01-31 to 2024-02-29 is 0 months.

    Returns:
        Number of completed months, or 0 when *end* precedes *start*.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def is_same_day(first: datetime | date, second: datetime | date) -> bool:
    """Check whether two timestamps fall on the same calendar day."""
    first_day = first.date() if isinstance(first, datetime) else first
    second_day = second.date() if isinstance(second, datetime) else second
    return first_day == second_day
