"""Halachic-time clock core: zmanim, seasonal hours and the Hebrew date."""
from __future__ import annotations

from .exceptions import (
    InvalidHebrewDateInput,
    OracleUnavailableError,
    PolarRegionError,
    ZmanClockError,
)
from .hebrew_calendar import HebrewDate
from .location import Location, TimeZoneContext
from .pipeline import ClockFrame, ClockPipeline
from .seasonal_clock import SeasonalHourState, project
from .virtual_clock import VirtualClock
from .zmanim_engine import Zman, ZmanimSet, compute_zmanim

__version__ = "1.0.0"

__all__ = [
    "ClockFrame",
    "ClockPipeline",
    "HebrewDate",
    "InvalidHebrewDateInput",
    "Location",
    "OracleUnavailableError",
    "PolarRegionError",
    "SeasonalHourState",
    "TimeZoneContext",
    "VirtualClock",
    "Zman",
    "ZmanClockError",
    "ZmanimSet",
    "compute_zmanim",
    "project",
]
