"""Cross-check almanac transition times against an ERFA solar position."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import erfa
import numpy as np
import pytest

from sunphase.calendar import decompose
from sunphase.phases import PHASE_BOUNDARIES, PhaseEngine

# Almanac accuracy is a few minutes; near the horizon the sun moves well under
# a quarter of a degree per minute at these latitudes.
TOLERANCE_DEG = 1.0


def _solar_altitude_degrees(epoch_seconds: int, lat: float, lon: float) -> float:
    dt = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    utc1, utc2 = erfa.dtf2d(
        "UTC", dt.year, dt.month, dt.day, dt.hour, dt.minute, float(dt.second)
    )
    tai1, tai2 = erfa.utctai(utc1, utc2)
    tt1, tt2 = erfa.taitt(tai1, tai2)
    ut11, ut12 = erfa.utcut1(utc1, utc2, 0.0)

    pvh, _ = erfa.epv00(tt1, tt2)
    sun_gcrs = -np.asarray(pvh["p"], dtype=float)
    rotation = np.asarray(erfa.c2t06a(tt1, tt2, ut11, ut12, 0.0, 0.0), dtype=float)
    sun_itrs = rotation @ sun_gcrs

    lat_rad = math.radians(lat)
    lon_rad = math.radians(lon)
    up = np.array(
        [
            math.cos(lat_rad) * math.cos(lon_rad),
            math.cos(lat_rad) * math.sin(lon_rad),
            math.sin(lat_rad),
        ]
    )
    cosine = float(np.dot(sun_itrs / np.linalg.norm(sun_itrs), up))
    return math.degrees(math.asin(max(-1.0, min(1.0, cosine))))


@pytest.mark.parametrize(
    "lat, lon, day",
    [
        (42.33, -83.05, (2025, 6, 21)),
        (51.5, 0.0, (2025, 1, 15)),
        (-33.87, 151.21, (2025, 3, 20)),
    ],
)
def test_transitions_match_solar_altitude(lat, lon, day):
    midnight = int(datetime(*day, tzinfo=timezone.utc).timestamp())
    engine = PhaseEngine(lat, lon)
    schedule = engine.schedule(decompose(midnight).day_of_year)

    assert schedule
    for transition in schedule:
        # Minutes are truncated, so sample the middle of the minute.
        instant = midnight + transition.minute_of_day * 60 + 30
        expected = 90.0 - PHASE_BOUNDARIES[transition.phase].zenith
        altitude = _solar_altitude_degrees(instant, lat, lon)
        assert altitude == pytest.approx(expected, abs=TOLERANCE_DEG), transition.phase.name
