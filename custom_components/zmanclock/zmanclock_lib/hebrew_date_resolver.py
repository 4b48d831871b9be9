"""Hebrew date for an instant, rolling at tzeis, and the facts derived from it.

Every fact takes the one resolved ``HebrewDate``; tzeis is only consulted in
``resolve`` so all fields agree on which day it is.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import TypeVar

from .const import DEFAULT_CANDLE_LIGHTING_OFFSET, HEBREW_WEEKDAYS
from .hebrew_calendar import (
    NISAN,
    HebrewDate,
    holiday_events,
    is_minor_fast,
    is_yom_tov,
    join_sedra,
    omer_day,
    omer_text,
    render_holidays,
    sedra_names,
)
from .location import TimeZoneContext
from .zmanim_engine import ZmanimSet

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")

SATURDAY = 5  # date.weekday()
FRIDAY = 4


def resolve(instant: datetime, timezone: TimeZoneContext, tzeis: datetime) -> HebrewDate:
    """Hebrew date at ``instant``: the civil day's date until tzeis, then the next."""
    candidate = HebrewDate.from_civil(timezone.civil_date(instant))
    if instant < tzeis:
        return candidate
    return candidate.successor()


def get_holidays(hdate: HebrewDate, in_israel: bool) -> list[str]:
    return render_holidays(holiday_events(hdate), in_israel)


def get_sedra(hdate: HebrewDate, in_israel: bool) -> str | None:
    """Weekly portion of the Shabbos on or after ``hdate``."""
    civil = hdate.to_civil()
    shabbos = civil + timedelta(days=(SATURDAY - civil.weekday()) % 7)
    return join_sedra(sedra_names(shabbos, in_israel))


def get_omer_count(hdate: HebrewDate) -> int | None:
    return omer_day(hdate)


def is_yom_tov_tomorrow(hdate: HebrewDate, in_israel: bool) -> bool:
    return is_yom_tov(hdate.successor(), in_israel)


@dataclass(frozen=True)
class SpecialDayStatus:
    minor_fast: bool = False
    biur_chametz: bool = False


def is_biur_chametz_day(hdate: HebrewDate) -> bool:
    """14 Nisan, or 13 Nisan when the 14th is Shabbos."""
    if hdate.month != NISAN:
        return False
    if hdate.day == 14:
        return True
    if hdate.day == 13:
        return hdate.successor().to_civil().weekday() == SATURDAY
    return False


def get_special_day_status(hdate: HebrewDate, in_israel: bool) -> SpecialDayStatus:
    # fasts and Erev Pesach fall on the same days in and out of Israel
    return SpecialDayStatus(
        minor_fast=is_minor_fast(hdate),
        biur_chametz=is_biur_chametz_day(hdate),
    )


def candle_lighting(
    hdate: HebrewDate,
    civil_date: date,
    sunset: datetime,
    in_israel: bool,
    offset_minutes: int = DEFAULT_CANDLE_LIGHTING_OFFSET,
) -> datetime | None:
    """Candle lighting before Shabbos or yom tov, or None when not relevant now.

    Only before tzeis (while the Hebrew date still belongs to the civil day),
    so it never fires again after the date rolls over.
    """
    if hdate.to_civil() != civil_date:
        return None
    if civil_date.weekday() != FRIDAY and not is_yom_tov_tomorrow(hdate, in_israel):
        return None
    return sunset - timedelta(minutes=offset_minutes)


def biur_chametz_deadline(zmanim: ZmanimSet) -> datetime:
    """End of the fifth seasonal hour."""
    return zmanim.sunrise + zmanim.day_hour * 5


@dataclass(frozen=True)
class DayOfWeek:
    today: int  # 0 = Sunday
    tomorrow: int
    text: str


def day_of_week_display(
    instant: datetime, civil_date: date, zmanim: ZmanimSet
) -> DayOfWeek:
    """Weekday label that follows the same rollover as the Hebrew date.

    Between sunset and tzeis both days are shown.
    """
    today = (civil_date.weekday() + 1) % 7
    tomorrow = (today + 1) % 7
    if instant >= zmanim.tzeis:
        return DayOfWeek(today=tomorrow, tomorrow=(tomorrow + 1) % 7,
                         text=HEBREW_WEEKDAYS[tomorrow])
    if instant >= zmanim.sunset:
        text = f"{HEBREW_WEEKDAYS[today]}/{HEBREW_WEEKDAYS[tomorrow]}"
        return DayOfWeek(today=today, tomorrow=tomorrow, text=text)
    return DayOfWeek(today=today, tomorrow=tomorrow, text=HEBREW_WEEKDAYS[today])


@dataclass(frozen=True)
class CalendarFacts:
    holidays: list[str] = field(default_factory=list)
    sedra: str | None = None
    omer_count: int | None = None
    omer_text: str | None = None
    yom_tov_tomorrow: bool = False
    candle_lighting: datetime | None = None
    special: SpecialDayStatus = field(default_factory=SpecialDayStatus)
    biur_chametz_deadline: datetime | None = None


def _degrade(what: str, func: Callable[[], _T], default: _T) -> _T:
    try:
        return func()
    except Exception:
        _LOGGER.exception("Failed computing %s", what)
        return default


def resolve_facts(
    hdate: HebrewDate,
    civil_date: date,
    zmanim: ZmanimSet,
    in_israel: bool,
    candle_offset: int = DEFAULT_CANDLE_LIGHTING_OFFSET,
) -> CalendarFacts:
    """All display facts for ``hdate``; a failing fact falls back to empty."""
    omer = _degrade("omer count", lambda: get_omer_count(hdate), None)
    special = _degrade(
        "special day status",
        lambda: get_special_day_status(hdate, in_israel),
        SpecialDayStatus(),
    )
    return CalendarFacts(
        holidays=_degrade("holidays", lambda: get_holidays(hdate, in_israel), []),
        sedra=_degrade("sedra", lambda: get_sedra(hdate, in_israel), None),
        omer_count=omer,
        omer_text=omer_text(omer) if omer else None,
        yom_tov_tomorrow=_degrade(
            "yom tov tomorrow", lambda: is_yom_tov_tomorrow(hdate, in_israel), False
        ),
        candle_lighting=_degrade(
            "candle lighting",
            lambda: candle_lighting(
                hdate, civil_date, zmanim.sunset, in_israel, candle_offset
            ),
            None,
        ),
        special=special,
        biur_chametz_deadline=(
            biur_chametz_deadline(zmanim) if special.biur_chametz else None
        ),
    )
