"""Halachic times (zmanim) for the civil day of an instant.

The oracle is queried once per civil day (``SolarDay``); everything else in a
``ZmanimSet`` is arithmetic on those results, so it is re-derived freely.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from .astronomy import RISING, SETTING, AstronomicalOracle, ZmanimOracle
from .const import (
    ALOS_DEGREES,
    MINCHA_GEDOLA_FLOOR,
    MISHEYAKIR_DEGREES,
    RABBEINU_TAM_OFFSET,
    TZEIS_DEGREES,
)
from .exceptions import PolarRegionError
from .location import Location, TimeZoneContext

_LOGGER = logging.getLogger(__name__)


class Zman(str, Enum):
    """Named zmanim, in the order they are exposed."""

    ALOS = "alos"
    MISHEYAKIR = "misheyakir"
    SUNRISE = "sunrise"
    SHEMA_MGA = "shema_mga"
    SHEMA_GRA = "shema_gra"
    TEFILA_GRA = "tefila_gra"
    CHATZOS = "chatzos"
    MINCHA_GEDOLA = "mincha_gedola"
    MINCHA_KETANA = "mincha_ketana"
    PLAG_HAMINCHA = "plag_hamincha"
    SUNSET = "sunset"
    TZEIS = "tzeis"
    RABBEINU_TAM = "rabbeinu_tam"
    CHATZOS_LAYLA = "chatzos_layla"


@dataclass(frozen=True)
class SolarDay:
    """Raw oracle answers for one civil day."""

    civil_date: date
    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime
    prev_sunset: datetime
    alos: datetime
    mga_end: datetime
    misheyakir: datetime
    tzeis: datetime


@dataclass(frozen=True)
class ZmanimSet:
    civil_date: date
    day_hour: timedelta
    mga_day_hour: timedelta
    sunrise: datetime
    sunset: datetime
    prev_sunset: datetime
    next_sunrise: datetime
    alos: datetime
    misheyakir: datetime
    tzeis: datetime
    chatzos: datetime
    mincha_gedola: datetime
    mincha_ketana: datetime
    plag_hamincha: datetime
    shema_gra: datetime
    tefila_gra: datetime
    shema_mga: datetime
    rabbeinu_tam: datetime
    chatzos_layla: datetime

    def __getitem__(self, zman: Zman) -> datetime:
        return getattr(self, Zman(zman).value)

    def items(self) -> Iterator[tuple[Zman, datetime]]:
        for zman in Zman:
            yield zman, self[zman]


def _required(value: datetime | None, what: str, location: Location) -> datetime:
    if value is None:
        raise PolarRegionError(location.latitude, location.longitude, what)
    return value


def solar_day(
    oracle: AstronomicalOracle, location: Location, civil_date: date
) -> SolarDay:
    """Query the oracle for everything one civil day needs.

    Raises PolarRegionError when any of the events does not happen.
    """
    yesterday = civil_date - timedelta(days=1)
    tomorrow = civil_date + timedelta(days=1)

    return SolarDay(
        civil_date=civil_date,
        sunrise=_required(oracle.rise_set(civil_date, RISING), "sunrise", location),
        sunset=_required(oracle.rise_set(civil_date, SETTING), "sunset", location),
        next_sunrise=_required(
            oracle.rise_set(tomorrow, RISING), "sunrise tomorrow", location
        ),
        prev_sunset=_required(
            oracle.rise_set(yesterday, SETTING), "sunset yesterday", location
        ),
        alos=_required(
            oracle.altitude_crossing(civil_date, RISING, ALOS_DEGREES), "alos", location
        ),
        mga_end=_required(
            oracle.altitude_crossing(civil_date, SETTING, ALOS_DEGREES),
            "end of the Magen Avraham day",
            location,
        ),
        misheyakir=_required(
            oracle.altitude_crossing(civil_date, RISING, MISHEYAKIR_DEGREES),
            "misheyakir",
            location,
        ),
        tzeis=_required(
            oracle.altitude_crossing(civil_date, SETTING, TZEIS_DEGREES), "tzeis", location
        ),
    )


def derive_zmanim(sun: SolarDay, instant: datetime) -> ZmanimSet:
    """Build the full ZmanimSet from one day's oracle results.

    ``instant`` only matters for chatzos layla: once rabbeinu tam has passed
    the coming night is the active one, otherwise the night that ended at
    this morning's sunrise.
    """
    day_hour = (sun.sunset - sun.sunrise) / 12
    mga_day_hour = (sun.mga_end - sun.alos) / 12

    chatzos = sun.sunrise + (sun.sunset - sun.sunrise) / 2
    rabbeinu_tam = sun.sunset + RABBEINU_TAM_OFFSET

    if rabbeinu_tam <= instant:
        chatzos_layla = sun.sunset + (sun.next_sunrise - sun.sunset) / 2
    else:
        chatzos_layla = sun.prev_sunset + (sun.sunrise - sun.prev_sunset) / 2

    return ZmanimSet(
        civil_date=sun.civil_date,
        day_hour=day_hour,
        mga_day_hour=mga_day_hour,
        sunrise=sun.sunrise,
        sunset=sun.sunset,
        prev_sunset=sun.prev_sunset,
        next_sunrise=sun.next_sunrise,
        alos=sun.alos,
        misheyakir=sun.misheyakir,
        tzeis=sun.tzeis,
        chatzos=chatzos,
        mincha_gedola=chatzos + max(MINCHA_GEDOLA_FLOOR, day_hour / 2),
        mincha_ketana=sun.sunrise + day_hour * 9.5,
        plag_hamincha=sun.sunrise + day_hour * 10.75,
        shema_gra=sun.sunrise + day_hour * 3,
        tefila_gra=sun.sunrise + day_hour * 4,
        shema_mga=sun.alos + mga_day_hour * 3,
        rabbeinu_tam=rabbeinu_tam,
        chatzos_layla=chatzos_layla,
    )


def compute_zmanim(
    location: Location,
    timezone: TimeZoneContext,
    instant: datetime,
    oracle: AstronomicalOracle | None = None,
) -> ZmanimSet:
    """Zmanim for the civil day of ``instant`` in ``timezone``."""
    if oracle is None:
        oracle = ZmanimOracle(location, timezone)
    civil_date = timezone.civil_date(instant)
    return derive_zmanim(solar_day(oracle, location, civil_date), instant)


class ZmanimCache:
    """Keeps the last SolarDay until the location, zone or civil day changes."""

    def __init__(self, oracle_factory=ZmanimOracle) -> None:
        self._oracle_factory = oracle_factory
        self._oracle: AstronomicalOracle | None = None
        self._oracle_key: tuple[Location, TimeZoneContext] | None = None
        self._key: tuple[Location, TimeZoneContext, date] | None = None
        self._sun: SolarDay | None = None

    def invalidate(self) -> None:
        self._key = None
        self._sun = None

    def oracle_for(
        self, location: Location, timezone: TimeZoneContext
    ) -> AstronomicalOracle:
        if self._oracle is None or self._oracle_key != (location, timezone):
            self._oracle = self._oracle_factory(location, timezone)
            self._oracle_key = (location, timezone)
        return self._oracle

    def solar_day(
        self, location: Location, timezone: TimeZoneContext, instant: datetime
    ) -> SolarDay:
        civil_date = timezone.civil_date(instant)
        key = (location, timezone, civil_date)
        if self._sun is not None and self._key == key:
            return self._sun

        _LOGGER.debug("Computing sun times for %s at %s", civil_date, location)
        sun = solar_day(self.oracle_for(location, timezone), location, civil_date)
        self._key = key
        self._sun = sun
        return sun

    def zmanim(
        self, location: Location, timezone: TimeZoneContext, instant: datetime
    ) -> ZmanimSet:
        return derive_zmanim(self.solar_day(location, timezone, instant), instant)
