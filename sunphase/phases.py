"""Eight-phase solar illumination engine."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

from .almanac import (
    ASTRONOMICAL_ZENITH,
    CIVIL_ZENITH,
    NAUTICAL_ZENITH,
    OFFICIAL_ZENITH,
    Crossing,
    CrossingResult,
    NoCrossing,
    sun_crossing,
)
from .calendar import MINUTES_PER_DAY, SECONDS_PER_DAY, decompose

__all__ = [
    "Boundary",
    "Location",
    "PHASE_BOUNDARIES",
    "Phase",
    "PhaseEngine",
    "PhaseState",
    "Transition",
    "phase_name",
]

LOGGER = logging.getLogger(__name__)


class Phase(IntEnum):
    """Illumination phases in circadian order; NIGHT wraps to the next morning."""

    ASTRONOMICAL_TWILIGHT_MORNING = 0
    NAUTICAL_TWILIGHT_MORNING = 1
    CIVIL_TWILIGHT_MORNING = 2
    DAY = 3
    CIVIL_TWILIGHT_EVENING = 4
    NAUTICAL_TWILIGHT_EVENING = 5
    ASTRONOMICAL_TWILIGHT_EVENING = 6
    NIGHT = 7


@dataclass(frozen=True)
class Boundary:
    """Threshold crossing at which a phase begins."""

    twilight: str
    zenith: float
    sunset: bool


# Indexed by Phase ordinal.
PHASE_BOUNDARIES: Tuple[Boundary, ...] = (
    Boundary("astronomical", ASTRONOMICAL_ZENITH, False),
    Boundary("nautical", NAUTICAL_ZENITH, False),
    Boundary("civil", CIVIL_ZENITH, False),
    Boundary("official", OFFICIAL_ZENITH, False),
    Boundary("official", OFFICIAL_ZENITH, True),
    Boundary("civil", CIVIL_ZENITH, True),
    Boundary("nautical", NAUTICAL_ZENITH, True),
    Boundary("astronomical", ASTRONOMICAL_ZENITH, True),
)

_RISING_PHASES_HIGHEST_FIRST = (
    Phase.DAY,
    Phase.CIVIL_TWILIGHT_MORNING,
    Phase.NAUTICAL_TWILIGHT_MORNING,
    Phase.ASTRONOMICAL_TWILIGHT_MORNING,
)


def phase_name(phase: Phase) -> str:
    return Phase(phase).name


@dataclass(frozen=True)
class Location:
    """Observer position in degrees, north and east positive."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Transition:
    """Phase and the UTC minute of day it begins.

    ``minute_of_day`` is at least 1440 for boundaries that roll past UTC
    midnight after an earlier boundary of the same schedule.
    """

    phase: Phase
    minute_of_day: int


@dataclass(frozen=True)
class PhaseState:
    phase: Phase
    seconds_until_next_phase: int
    next_phase: Phase


class PhaseEngine:
    """Classify UTC instants into illumination phases for a fixed location.

    Every call recomputes the schedule from scratch; an engine holds nothing
    but its location and can be shared freely.
    """

    def __init__(self, latitude: float, longitude: float) -> None:
        self._location = Location(latitude, longitude)

    @property
    def location(self) -> Location:
        return self._location

    def phase_begins(self, day_of_year: int, phase: Phase) -> CrossingResult:
        """Run the almanac primitive for the boundary that starts *phase*."""

        boundary = PHASE_BOUNDARIES[phase]
        return sun_crossing(
            day_of_year,
            self._location.latitude,
            self._location.longitude,
            boundary.zenith,
            boundary.sunset,
        )

    def schedule(self, day_of_year: int) -> List[Transition]:
        """Return the day's transitions in phase order, skipping absent ones.

        Begin times are reduced to the UTC day and then stitched so that
        evening boundaries past midnight sort after the morning ones.
        """

        transitions: List[Transition] = []
        previous = 0
        wrap_offset = 0
        for phase in Phase:
            result = self.phase_begins(day_of_year, phase)
            if isinstance(result, NoCrossing):
                if LOGGER.isEnabledFor(logging.DEBUG):
                    LOGGER.debug(
                        json.dumps(
                            {
                                "event": "boundary_absent",
                                "day_of_year": day_of_year,
                                "phase": phase.name,
                                "status": result.status,
                            }
                        )
                    )
                continue

            begins = result.minute_of_day % MINUTES_PER_DAY
            if begins < previous:
                wrap_offset = MINUTES_PER_DAY
            begins += wrap_offset
            transitions.append(Transition(phase, begins))
            previous = begins
        return transitions

    def calculate(self, epoch_seconds: int) -> PhaseState:
        """Return the phase holding at *epoch_seconds* and the time to the next one.

        Parameters
        ----------
        epoch_seconds:
            UTC instant as seconds since 1970-01-01T00:00:00Z.

        Returns
        -------
        PhaseState
            Current phase, whole seconds until the next transition and the
            phase that transition starts.
        """

        civil = decompose(epoch_seconds)
        now = civil.hour * 3600 + civil.minute * 60 + civil.second
        day_of_year = civil.day_of_year

        today = self.schedule(day_of_year)
        for index, transition in enumerate(today):
            begins = transition.minute_of_day * 60
            if begins <= now:
                continue
            if index:
                return PhaseState(today[index - 1].phase, begins - now, transition.phase)
            yesterday = self.schedule(day_of_year - 1)
            carried = self._carried_over(yesterday, now)
            if carried is not None:
                return carried
            closing = self._closing_phase(yesterday, day_of_year - 1)
            return PhaseState(closing, begins - now, transition.phase)

        if not today:
            carried = self._carried_over(self.schedule(day_of_year - 1), now)
            if carried is not None:
                return carried

        # Past tonight's last boundary: wait for tomorrow's first one.
        closing = self._closing_phase(today, day_of_year)
        upcoming = self._first_transition(day_of_year + 1)
        if upcoming is None:
            return PhaseState(closing, SECONDS_PER_DAY - now, closing)
        return PhaseState(
            closing,
            (MINUTES_PER_DAY + upcoming.minute_of_day) * 60 - now,
            upcoming.phase,
        )

    @staticmethod
    def _carried_over(yesterday: List[Transition], now: int) -> Optional[PhaseState]:
        """Match *now* against yesterday's boundaries that rolled past midnight."""

        for before, transition in zip(yesterday, yesterday[1:]):
            begins = (transition.minute_of_day - MINUTES_PER_DAY) * 60
            if begins > now:
                return PhaseState(before.phase, begins - now, transition.phase)
        return None

    def _closing_phase(self, transitions: List[Transition], day_of_year: int) -> Phase:
        if transitions:
            return transitions[-1].phase
        return self._steady_phase(day_of_year)

    def _steady_phase(self, day_of_year: int) -> Phase:
        """Phase holding all day when no threshold is crossed."""

        for phase in _RISING_PHASES_HIGHEST_FIRST:
            result = self.phase_begins(day_of_year, phase)
            if isinstance(result, NoCrossing) and result.status == "polar_day":
                return phase
        return Phase.NIGHT

    def _first_transition(self, day_of_year: int) -> Optional[Transition]:
        for phase in Phase:
            result = self.phase_begins(day_of_year, phase)
            if isinstance(result, Crossing):
                return Transition(phase, result.minute_of_day % MINUTES_PER_DAY)
        return None
