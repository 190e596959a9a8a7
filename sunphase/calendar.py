"""Civil calendar conversion for raw epoch-second counters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

__all__ = [
    "CivilTime",
    "EPOCH_YEAR",
    "MINUTES_PER_DAY",
    "SECONDS_PER_DAY",
    "days_in_year",
    "decompose",
    "is_leap_year",
    "month_lengths",
    "recompose",
]

EPOCH_YEAR = 1970
SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
MINUTES_PER_DAY = 1440

_MONTH_DAYS: Tuple[int, ...] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


@dataclass(frozen=True)
class CivilTime:
    """Calendar fields of a UTC instant.

    ``month`` and ``day_of_year`` are zero-based, ``day`` is one-based and
    ``year_offset`` counts years since 1970.
    """

    second: int
    minute: int
    hour: int
    day: int
    month: int
    year_offset: int
    day_of_year: int

    @property
    def year(self) -> int:
        return EPOCH_YEAR + self.year_offset


def is_leap_year(year: int) -> bool:
    """Proleptic Gregorian leap rule for a full year number."""

    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def month_lengths(year: int) -> Tuple[int, ...]:
    if is_leap_year(year):
        return _MONTH_DAYS[:1] + (29,) + _MONTH_DAYS[2:]
    return _MONTH_DAYS


def decompose(epoch_seconds: int) -> CivilTime:
    """Split *epoch_seconds* into UTC calendar fields.

    Parameters
    ----------
    epoch_seconds:
        Non-negative seconds since 1970-01-01T00:00:00Z, leap seconds ignored.

    Returns
    -------
    CivilTime
        Decomposed fields; the day of year is zero-based.
    """

    remaining, second = divmod(epoch_seconds, SECONDS_PER_MINUTE)
    remaining, minute = divmod(remaining, 60)
    days, hour = divmod(remaining, 24)

    year_offset = 0
    while days >= days_in_year(EPOCH_YEAR + year_offset):
        days -= days_in_year(EPOCH_YEAR + year_offset)
        year_offset += 1
    day_of_year = days

    month = 0
    for month, length in enumerate(month_lengths(EPOCH_YEAR + year_offset)):
        if days < length:
            break
        days -= length

    return CivilTime(
        second=second,
        minute=minute,
        hour=hour,
        day=days + 1,
        month=month,
        year_offset=year_offset,
        day_of_year=day_of_year,
    )


def recompose(civil: CivilTime) -> int:
    """Inverse of :func:`decompose`.

    Month and day of month are used when both are in range; otherwise the day
    of year is taken as authoritative, which lets callers shift
    ``day_of_year`` alone (e.g. to reach tomorrow) and still convert back.
    """

    days = sum(days_in_year(EPOCH_YEAR + offset) for offset in range(civil.year_offset))

    if 0 <= civil.month <= 11 and 1 <= civil.day <= 31:
        days += sum(month_lengths(civil.year)[: civil.month])
        days += civil.day - 1
    else:
        days += civil.day_of_year

    return (
        days * SECONDS_PER_DAY
        + civil.hour * SECONDS_PER_HOUR
        + civil.minute * SECONDS_PER_MINUTE
        + civil.second
    )
