"""Solar illumination phase computations for epoch-counter clocks."""

from .almanac import ZENITH_ANGLES, Crossing, NoCrossing, sun_crossing
from .calendar import CivilTime, decompose, recompose
from .phases import Location, Phase, PhaseEngine, PhaseState, Transition, phase_name

__all__ = [
    "CivilTime",
    "Crossing",
    "Location",
    "NoCrossing",
    "Phase",
    "PhaseEngine",
    "PhaseState",
    "Transition",
    "ZENITH_ANGLES",
    "decompose",
    "phase_name",
    "recompose",
    "sun_crossing",
]
