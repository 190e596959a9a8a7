"""Sunrise/sunset threshold crossings from the 1990 Almanac for Computers.

The Nautical Almanac Office algorithm is evaluated in single precision so the
results match what a small clock device computes for the same inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional, Union

import numpy as np

__all__ = [
    "ASTRONOMICAL_ZENITH",
    "CIVIL_ZENITH",
    "Crossing",
    "CrossingResult",
    "NAUTICAL_ZENITH",
    "NoCrossing",
    "OFFICIAL_ZENITH",
    "ZENITH_ANGLES",
    "classify_hour_angle",
    "sun_crossing",
]

OFFICIAL_ZENITH = 90.83333
CIVIL_ZENITH = 96.0
NAUTICAL_ZENITH = 102.0
ASTRONOMICAL_ZENITH = 108.0

ZENITH_ANGLES: Dict[str, float] = {
    "official": OFFICIAL_ZENITH,
    "civil": CIVIL_ZENITH,
    "nautical": NAUTICAL_ZENITH,
    "astronomical": ASTRONOMICAL_ZENITH,
}

_f32 = np.float32

_DEG_PER_HOUR = _f32(15.0)
_HOURS_PER_DAY = _f32(24.0)
_FULL_TURN = _f32(360.0)
_QUADRANT = _f32(90.0)
_MINUTES_PER_HOUR = _f32(60.0)

# Almanac coefficients.
_MEAN_ANOMALY_RATE = _f32(0.9856)
_MEAN_ANOMALY_EPOCH = _f32(3.289)
_CENTER_1 = _f32(1.916)
_CENTER_2 = _f32(0.02)
_PERIHELION = _f32(282.634)
_COS_OBLIQUITY = _f32(0.91764)
_SIN_OBLIQUITY = _f32(0.39782)
_SIDEREAL_RATE = _f32(0.06571)
_SIDEREAL_EPOCH = _f32(6.622)


@dataclass(frozen=True)
class Crossing:
    """UTC time of day at which the sun crosses a zenith threshold.

    ``hour`` is not wrapped into ``[0, 24)``: depending on longitude and season
    it can be negative or exceed 23.
    """

    hour: int
    minute: int

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute


@dataclass(frozen=True)
class NoCrossing:
    """The sun stays on one side of the threshold for the whole day."""

    status: Literal["polar_day", "polar_night"]


CrossingResult = Union[Crossing, NoCrossing]


def _normalize_360(degrees: np.float32) -> np.float32:
    # Single correction; inputs are within one turn of the range.
    if degrees > _FULL_TURN:
        return degrees - _FULL_TURN
    if degrees < 0:
        return degrees + _FULL_TURN
    return degrees


def classify_hour_angle(cos_h: float) -> Optional[NoCrossing]:
    """Return the no-crossing outcome for *cos_h*, or ``None`` when it crosses.

    ``cos_h`` equal to exactly ``1`` or ``-1`` is a tangent crossing.
    """

    if cos_h > 1:
        return NoCrossing("polar_night")
    if cos_h < -1:
        return NoCrossing("polar_day")
    return None


def sun_crossing(
    day_of_year: int,
    latitude: float,
    longitude: float,
    zenith: float,
    sunset: bool,
) -> CrossingResult:
    """Compute when the sun crosses *zenith* on *day_of_year*.

    Parameters
    ----------
    day_of_year:
        Zero-based day of the year. Negative values are shifted by 365 days.
    latitude, longitude:
        Geographic coordinates in degrees (north and east positive).
    zenith:
        Threshold angle from the zenith in degrees, e.g. :data:`CIVIL_ZENITH`.
    sunset:
        ``True`` for the setting crossing, ``False`` for the rising one.

    Returns
    -------
    Crossing | NoCrossing
        The UTC hour and minute of the crossing, or the reason it does not
        happen on this day at this latitude.
    """

    if day_of_year < 0:
        day_of_year += 365

    lon_hour = _f32(longitude) / _DEG_PER_HOUR
    event_hour = _f32(18.0) if sunset else _f32(6.0)
    t = _f32(day_of_year) + (event_hour - lon_hour) / _HOURS_PER_DAY

    mean_anomaly = _MEAN_ANOMALY_RATE * t - _MEAN_ANOMALY_EPOCH
    m_rad = np.deg2rad(mean_anomaly)
    true_longitude = _normalize_360(
        mean_anomaly
        + _CENTER_1 * np.sin(m_rad)
        + _CENTER_2 * np.sin(_f32(2.0) * m_rad)
        + _PERIHELION
    )
    l_rad = np.deg2rad(true_longitude)

    right_ascension = _normalize_360(
        np.rad2deg(np.arctan(_COS_OBLIQUITY * np.tan(l_rad)))
    )
    # Right ascension belongs in the same quadrant as the true longitude.
    right_ascension = right_ascension + (
        np.floor(true_longitude / _QUADRANT) * _QUADRANT
        - np.floor(right_ascension / _QUADRANT) * _QUADRANT
    )
    right_ascension = right_ascension / _DEG_PER_HOUR

    sin_dec = _SIN_OBLIQUITY * np.sin(l_rad)
    cos_dec = np.cos(np.arcsin(sin_dec))

    lat_rad = np.deg2rad(_f32(latitude))
    cos_h = (np.cos(np.deg2rad(_f32(zenith))) - sin_dec * np.sin(lat_rad)) / (
        cos_dec * np.cos(lat_rad)
    )

    outcome = classify_hour_angle(cos_h)
    if outcome is not None:
        return outcome

    hour_angle = np.rad2deg(np.arccos(cos_h))
    if not sunset:
        hour_angle = _FULL_TURN - hour_angle
    hour_angle = hour_angle / _DEG_PER_HOUR

    local_mean_time = hour_angle + right_ascension - _SIDEREAL_RATE * t - _SIDEREAL_EPOCH
    universal_time = local_mean_time - lon_hour

    # Truncate the minute after flooring the hour so 16h60m cannot occur.
    floored = np.floor(universal_time)
    minute = int(_MINUTES_PER_HOUR * (universal_time - floored))
    return Crossing(hour=int(floored), minute=minute)
