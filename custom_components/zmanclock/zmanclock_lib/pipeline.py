"""One render tick: displayed instant -> zmanim -> hand angle -> Hebrew date."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from .astronomy import ZmanimOracle
from .const import DEFAULT_CANDLE_LIGHTING_OFFSET
from .exceptions import OracleUnavailableError, PolarRegionError
from .hebrew_calendar import HebrewDate
from .hebrew_date_resolver import (
    CalendarFacts,
    DayOfWeek,
    day_of_week_display,
    resolve,
    resolve_facts,
)
from .location import Location, TimeZoneContext
from .seasonal_clock import SeasonalHourState, SeasonalProjection, project
from .zmanim_engine import ZmanimCache, ZmanimSet

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockFrame:
    """Everything the renderer needs for one tick."""

    displayed_instant: datetime
    civil_date: date
    zmanim: ZmanimSet
    projection: SeasonalProjection
    hebrew_date: HebrewDate
    facts: CalendarFacts
    day_of_week: DayOfWeek


class ClockPipeline:
    def __init__(
        self,
        location: Location,
        timezone: TimeZoneContext,
        *,
        in_israel: bool = False,
        candle_offset: int = DEFAULT_CANDLE_LIGHTING_OFFSET,
        oracle_factory=ZmanimOracle,
        state: SeasonalHourState | None = None,
    ) -> None:
        self.location = location
        self.timezone = timezone
        self.in_israel = in_israel
        self.candle_offset = candle_offset
        self.state = state or SeasonalHourState()
        self._oracle_factory = oracle_factory
        self._cache = ZmanimCache(oracle_factory)
        self._polar_error: PolarRegionError | None = None
        self.last_frame: ClockFrame | None = None

    @property
    def supported(self) -> bool:
        return self._polar_error is None

    def set_location(
        self,
        location: Location,
        timezone: TimeZoneContext,
        in_israel: bool | None = None,
    ) -> None:
        """Swap location and zone together; clears the unsupported state.

        For renderers that embed the core and move the observer at runtime.
        The Home Assistant integration reloads its entry instead, which builds
        a fresh pipeline.
        """
        self.location = location
        self.timezone = timezone
        if in_israel is not None:
            self.in_israel = in_israel
        self._cache.invalidate()
        self._polar_error = None
        self.last_frame = None
        _LOGGER.info("Location set to %s (%s)", location, timezone.iana_name or "local")

    def change_location(
        self,
        location: Location,
        timezone: TimeZoneContext,
        instant: datetime,
        in_israel: bool | None = None,
    ) -> None:
        """Switch only if the new location has zmanim at ``instant``.

        On PolarRegionError the previous location stays in effect.
        """
        ZmanimCache(self._oracle_factory).solar_day(location, timezone, instant)
        self.set_location(location, timezone, in_israel)

    def update(self, instant: datetime) -> ClockFrame | None:
        """Run the pipeline for ``instant``.

        Raises PolarRegionError while the location is unsupported. Returns
        the previous frame (possibly None) when the oracle is unavailable.
        """
        if self._polar_error is not None:
            raise self._polar_error

        try:
            zmanim = self._cache.zmanim(self.location, self.timezone, instant)
        except PolarRegionError as err:
            _LOGGER.warning("Halting updates: %s", err)
            self._polar_error = err
            raise
        except OracleUnavailableError as err:
            _LOGGER.warning("Astronomical data unavailable, keeping last values: %s", err)
            return self.last_frame

        civil_date = self.timezone.civil_date(instant)
        projection = project(instant, zmanim, self.state)
        hebrew_date = resolve(instant, self.timezone, zmanim.tzeis)
        facts = resolve_facts(
            hebrew_date, civil_date, zmanim, self.in_israel, self.candle_offset
        )

        self.last_frame = ClockFrame(
            displayed_instant=instant,
            civil_date=civil_date,
            zmanim=zmanim,
            projection=projection,
            hebrew_date=hebrew_date,
            facts=facts,
            day_of_week=day_of_week_display(instant, civil_date, zmanim),
        )
        return self.last_frame
