"""Astronomical oracle: sunrise/sunset and altitude crossings for a civil day."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Final, Protocol

from zmanim.util.geo_location import GeoLocation
from zmanim.zmanim_calendar import ZmanimCalendar

from .const import GEOMETRIC_ZENITH
from .exceptions import OracleUnavailableError
from .location import Location, TimeZoneContext

_LOGGER = logging.getLogger(__name__)

RISING: Final = 1
SETTING: Final = -1


class AstronomicalOracle(Protocol):
    """Sun event queries for one observer.

    Implementations return ``None`` when the sun does not cross the requested
    altitude on that day, and raise ``OracleUnavailableError`` for backend
    failures.
    """

    def rise_set(self, day: date, direction: int) -> datetime | None:
        ...

    def altitude_crossing(
        self, day: date, direction: int, degrees: float
    ) -> datetime | None:
        ...


def _create_geo(location: Location, timezone: TimeZoneContext) -> GeoLocation:
    return GeoLocation(
        name="ZmanClock",
        latitude=location.latitude,
        longitude=location.longitude,
        time_zone=timezone.iana_name or timezone.tzinfo,
        elevation=location.elevation,
    )


class ZmanimOracle:
    """``AstronomicalOracle`` backed by the zmanim (NOAA) calculator."""

    def __init__(self, location: Location, timezone: TimeZoneContext) -> None:
        self.location = location
        self.timezone = timezone
        self._geo = _create_geo(location, timezone)

    def _calendar(self, day: date) -> ZmanimCalendar:
        return ZmanimCalendar(geo_location=self._geo, date=day)

    def _query(self, day: date, what: str, func) -> datetime | None:
        try:
            result = func(self._calendar(day))
        except (ValueError, ArithmeticError):
            # acos() out of range: the sun never gets there today
            _LOGGER.debug("No %s on %s at %s", what, day, self.location)
            return None
        except Exception as err:
            raise OracleUnavailableError(f"{what} lookup failed for {day}: {err}") from err
        if result is None:
            return None
        return result.astimezone(self.timezone.tzinfo)

    def rise_set(self, day: date, direction: int) -> datetime | None:
        if direction == RISING:
            return self._query(day, "sunrise", lambda cal: cal.sunrise())
        return self._query(day, "sunset", lambda cal: cal.sunset())

    def altitude_crossing(
        self, day: date, direction: int, degrees: float
    ) -> datetime | None:
        zenith = GEOMETRIC_ZENITH + degrees
        if direction == RISING:
            return self._query(
                day,
                f"rising crossing at -{degrees}",
                lambda cal: cal.sunrise_offset_by_degrees(zenith),
            )
        return self._query(
            day,
            f"setting crossing at -{degrees}",
            lambda cal: cal.sunset_offset_by_degrees(zenith),
        )
