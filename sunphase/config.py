"""Environment-driven configuration for the sun phase service and tools."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

from .phases import Location

LOGGER = logging.getLogger(__name__)

LATITUDE_ENV = "SUNPHASE_LAT"
LONGITUDE_ENV = "SUNPHASE_LON"


class ConfigurationError(RuntimeError):
    """Raised when environment configuration is malformed."""


def _parse_degrees(name: str, raw: str, limit: float) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number of degrees, got {raw!r}") from exc
    if not -limit <= value <= limit:
        raise ConfigurationError(f"{name} must be within ±{limit:g} degrees, got {value}")
    return value


def resolve_default_location() -> Optional[Location]:
    """Return the location configured through the environment, if any."""

    raw_lat = os.environ.get(LATITUDE_ENV)
    raw_lon = os.environ.get(LONGITUDE_ENV)
    if not raw_lat and not raw_lon:
        return None
    if not raw_lat or not raw_lon:
        raise ConfigurationError(
            f"{LATITUDE_ENV} and {LONGITUDE_ENV} must be set together"
        )

    location = Location(
        latitude=_parse_degrees(LATITUDE_ENV, raw_lat, 90.0),
        longitude=_parse_degrees(LONGITUDE_ENV, raw_lon, 180.0),
    )
    LOGGER.info(
        json.dumps(
            {
                "event": "default_location",
                "latitude": location.latitude,
                "longitude": location.longitude,
            }
        )
    )
    return location
