"""FastAPI application exposing solar illumination phases."""

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import (
    AbsentTransitionModel,
    ErrorResponse,
    HealthResponse,
    LocationModel,
    PhaseQueryParams,
    PhaseResponse,
    ScheduleQueryParams,
    ScheduleResponse,
    TransitionModel,
    Twilight,
)
from sunphase.almanac import NoCrossing
from sunphase.calendar import EPOCH_YEAR, CivilTime, decompose, recompose
from sunphase.config import ConfigurationError, resolve_default_location
from sunphase.phases import PHASE_BOUNDARIES, Location, Phase, PhaseEngine

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("sunphase-api")

APP_DESCRIPTION = (
    "Solar illumination phases and time to the next transition, "
    "computed with the 1990 Almanac for Computers sunrise/sunset algorithm"
)

DEFAULT_LOCATION: Optional[Location] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global DEFAULT_LOCATION
    try:
        DEFAULT_LOCATION = resolve_default_location()
    except ConfigurationError as exc:
        LOGGER.error(json.dumps({"event": "configuration_failed", "error": str(exc)}))
        raise
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "default_location": None
                if DEFAULT_LOCATION is None
                else [DEFAULT_LOCATION.latitude, DEFAULT_LOCATION.longitude],
            }
        )
    )
    yield


app = FastAPI(
    title="Sun Phase API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def _format_utc(epoch_seconds: int) -> str:
    dt = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return dt.isoformat().replace("+00:00", "Z")


def _resolve_location(lat: Optional[float], lon: Optional[float]) -> Location:
    if lat is None and lon is None:
        if DEFAULT_LOCATION is None:
            raise HTTPException(
                status_code=400,
                detail="lat and lon are required when no default location is configured",
            )
        return DEFAULT_LOCATION
    if lat is None or lon is None:
        raise HTTPException(status_code=400, detail="lat and lon must be given together")
    return Location(latitude=lat, longitude=lon)


def _midnight_epoch(day: date) -> int:
    if day.year < EPOCH_YEAR:
        raise ValueError(f"date must not precede {EPOCH_YEAR}-01-01")
    return recompose(
        CivilTime(
            second=0,
            minute=0,
            hour=0,
            day=day.day,
            month=day.month - 1,
            year_offset=day.year - EPOCH_YEAR,
            day_of_year=0,
        )
    )


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    location = None
    if DEFAULT_LOCATION is not None:
        location = LocationModel(
            latitude=DEFAULT_LOCATION.latitude,
            longitude=DEFAULT_LOCATION.longitude,
        )
    return HealthResponse(ok=True, default_location=location)


@app.get(
    "/phase",
    response_model=PhaseResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def phase_endpoint(params: PhaseQueryParams = Depends()) -> PhaseResponse:
    start_time = time.perf_counter()
    location = _resolve_location(params.lat, params.lon)
    epoch = params.epoch if params.epoch is not None else int(time.time())

    state = PhaseEngine(location.latitude, location.longitude).calculate(epoch)
    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = PhaseResponse(
        latitude=location.latitude,
        longitude=location.longitude,
        epoch=epoch,
        instant_utc=_format_utc(epoch),
        phase=state.phase.name,
        seconds_until_next_phase=state.seconds_until_next_phase,
        next_phase=state.next_phase.name,
        next_transition_utc=_format_utc(epoch + state.seconds_until_next_phase),
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "phase",
                "lat": location.latitude,
                "lon": location.longitude,
                "epoch": epoch,
                "phase": response.phase,
                "seconds_until_next_phase": response.seconds_until_next_phase,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response


@app.get(
    "/schedule",
    response_model=ScheduleResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def schedule_endpoint(params: ScheduleQueryParams = Depends()) -> ScheduleResponse:
    start_time = time.perf_counter()
    location = _resolve_location(params.lat, params.lon)
    try:
        midnight = _midnight_epoch(params.date_utc)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    day_of_year = decompose(midnight).day_of_year
    engine = PhaseEngine(location.latitude, location.longitude)

    transitions = [
        TransitionModel(
            phase=transition.phase.name,
            twilight=Twilight(PHASE_BOUNDARIES[transition.phase].twilight),
            begins_utc=_format_utc(midnight + transition.minute_of_day * 60),
            minute_of_day=transition.minute_of_day,
        )
        for transition in engine.schedule(day_of_year)
    ]
    absent = []
    for phase in Phase:
        result = engine.phase_begins(day_of_year, phase)
        if isinstance(result, NoCrossing):
            absent.append(
                AbsentTransitionModel(
                    phase=phase.name,
                    twilight=Twilight(PHASE_BOUNDARIES[phase].twilight),
                    status=result.status,
                )
            )

    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps(
            {
                "event": "schedule",
                "lat": location.latitude,
                "lon": location.longitude,
                "date": params.date_utc.isoformat(),
                "transitions": len(transitions),
                "absent": len(absent),
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return ScheduleResponse(
        date_utc=params.date_utc,
        day_of_year=day_of_year,
        latitude=location.latitude,
        longitude=location.longitude,
        transitions=transitions,
        absent=absent,
    )
