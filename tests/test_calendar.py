from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from sunphase.calendar import (
    CivilTime,
    days_in_year,
    decompose,
    is_leap_year,
    month_lengths,
    recompose,
)


def _epoch(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp())


def test_leap_rule():
    assert is_leap_year(1972)
    assert is_leap_year(2000)
    assert not is_leap_year(1971)
    assert not is_leap_year(2100)
    assert days_in_year(2024) == 366
    assert days_in_year(2025) == 365
    assert month_lengths(2024)[1] == 29
    assert month_lengths(2025)[1] == 28
    assert sum(month_lengths(2024)) == 366


def test_epoch_origin():
    civil = decompose(0)
    assert civil == CivilTime(
        second=0, minute=0, hour=0, day=1, month=0, year_offset=0, day_of_year=0
    )
    assert civil.year == 1970


def test_last_day_of_leap_year():
    assert decompose(_epoch(1972, 12, 31, 23, 59, 59)).day_of_year == 365
    assert decompose(_epoch(1971, 12, 31, 12)).day_of_year == 364
    assert decompose(_epoch(1973, 1, 1)).day_of_year == 0


@pytest.mark.parametrize(
    "instant",
    [
        (1970, 1, 1, 0, 0, 1),
        (1972, 2, 29, 6, 30, 0),
        (1999, 12, 31, 23, 59, 59),
        (2000, 2, 29, 12, 0, 0),
        (2025, 6, 21, 17, 32, 15),
        (2038, 1, 19, 3, 14, 8),
        (2100, 3, 1, 0, 0, 0),
        (2106, 2, 7, 6, 28, 15),
    ],
)
def test_decompose_matches_datetime(instant):
    expected = datetime(*instant, tzinfo=timezone.utc)
    epoch = int(expected.timestamp())

    civil = decompose(epoch)

    assert civil.year == expected.year
    assert civil.month == expected.month - 1
    assert civil.day == expected.day
    assert civil.hour == expected.hour
    assert civil.minute == expected.minute
    assert civil.second == expected.second
    assert civil.day_of_year == expected.timetuple().tm_yday - 1
    assert recompose(civil) == epoch


def test_recompose_falls_back_to_day_of_year():
    today = decompose(_epoch(2024, 12, 31, 8, 15, 0))
    tomorrow = CivilTime(
        second=today.second,
        minute=today.minute,
        hour=today.hour,
        day=0,
        month=-1,
        year_offset=today.year_offset,
        day_of_year=today.day_of_year + 1,
    )

    assert recompose(tomorrow) == _epoch(2025, 1, 1, 8, 15, 0)


def test_recompose_prefers_month_and_day():
    civil = CivilTime(
        second=0, minute=0, hour=0, day=1, month=2, year_offset=54, day_of_year=0
    )
    assert recompose(civil) == _epoch(2024, 3, 1)
