"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EPOCH_MAX = 2**32 - 1


class Twilight(str, Enum):
    """Zenith thresholds bounding the phases."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


class PhaseQueryParams(BaseModel):
    """Validated query parameters for the ``/phase`` endpoint."""

    lat: Optional[float] = Field(None, ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: Optional[float] = Field(
        None, ge=-180.0, le=180.0, description="Longitude in degrees"
    )
    epoch: Optional[int] = Field(
        None,
        ge=0,
        le=EPOCH_MAX,
        description="UTC instant as seconds since 1970-01-01; defaults to now",
    )


class ScheduleQueryParams(BaseModel):
    """Validated query parameters for the ``/schedule`` endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    lat: Optional[float] = Field(None, ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: Optional[float] = Field(
        None, ge=-180.0, le=180.0, description="Longitude in degrees"
    )
    date_utc: date = Field(..., alias="date", description="UTC calendar date (YYYY-MM-DD)")


class LocationModel(BaseModel):
    latitude: float
    longitude: float


class PhaseResponse(BaseModel):
    """Current phase payload."""

    ok: bool = True
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    epoch: int = Field(..., description="Queried instant in epoch seconds")
    instant_utc: str = Field(..., description="Queried instant in UTC (ISO-8601)")
    phase: str = Field(..., description="Phase holding at the queried instant")
    seconds_until_next_phase: int = Field(
        ..., ge=0, description="Seconds until the next phase transition"
    )
    next_phase: str = Field(..., description="Phase that begins at the next transition")
    next_transition_utc: str = Field(
        ..., description="Next transition instant in UTC (ISO-8601)"
    )
    source: Literal["NAO-1990"] = Field(
        "NAO-1990", description="Almanac algorithm identifier"
    )


class TransitionModel(BaseModel):
    phase: str
    twilight: Twilight
    begins_utc: str = Field(..., description="Transition instant in UTC (ISO-8601)")
    minute_of_day: int = Field(
        ..., description="Minutes after UTC midnight of the requested date"
    )


class AbsentTransitionModel(BaseModel):
    phase: str
    twilight: Twilight
    status: Literal["polar_day", "polar_night"]


class ScheduleResponse(BaseModel):
    """Transition schedule for one UTC date."""

    ok: bool = True
    date_utc: date = Field(..., description="Requested UTC date")
    day_of_year: int = Field(..., description="Zero-based day of the year")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    transitions: List[TransitionModel]
    absent: List[AbsentTransitionModel]
    source: Literal["NAO-1990"] = Field(
        "NAO-1990", description="Almanac algorithm identifier"
    )


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    default_location: Optional[LocationModel]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
