"""Hebrew calendar capability on top of pyluach.

Months are numbered Nisan-first (1 = Nisan, 7 = Tishrei, 12 = Adar / Adar I,
13 = Adar II), the same numbering pyluach uses for its dates. The year itself
runs Tishrei-first, which is the order month navigation walks.
"""
from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Flag, auto

from pyluach import dates, parshios
from pyluach.hebrewcal import HebrewDate as PHebrewDate
from pyluach.hebrewcal import Month, Year

from .const import OMER_DAY
from .exceptions import InvalidHebrewDateInput

_LOGGER = logging.getLogger(__name__)

TISHREI = 7
NISAN = 1
ADAR = 12
ADAR_II = 13


def is_leap_year(year: int) -> bool:
    return Year(year).leap


def months_in_year(year: int) -> int:
    return 13 if is_leap_year(year) else 12


def days_in_month(year: int, month: int) -> int:
    """29 or 30, as the calendar rules for that year decide."""
    if month == ADAR_II and not is_leap_year(year):
        raise InvalidHebrewDateInput(f"Year {year} has no Adar II")
    if not 1 <= month <= 13:
        raise InvalidHebrewDateInput(f"Month {month} does not exist")
    return sum(1 for _ in Month(year, month).iterdates())


# ---------------------------------------------------------------------------
# Month numbering: Nisan-first number <-> position in the Tishrei-first year
# ---------------------------------------------------------------------------

def to_library_month(month: int, year: int) -> int:
    """Position (1-based) of ``month`` in ``year`` counted from Tishrei."""
    leap = is_leap_year(year)
    if month == ADAR_II:
        if not leap:
            raise InvalidHebrewDateInput(f"Year {year} has no Adar II")
        return 7
    if not 1 <= month <= 12:
        raise InvalidHebrewDateInput(f"Month {month} does not exist")
    if month >= TISHREI:
        return month - 6
    return month + (7 if leap else 6)


def from_library_month(ordinal: int, year: int) -> int:
    """Inverse of :func:`to_library_month`."""
    leap = is_leap_year(year)
    if not 1 <= ordinal <= (13 if leap else 12):
        raise InvalidHebrewDateInput(f"Year {year} has no month #{ordinal}")
    if ordinal <= 6:
        return ordinal + 6
    if leap:
        return ADAR_II if ordinal == 7 else ordinal - 7
    return ordinal - 6


@dataclass(frozen=True, order=True)
class HebrewDate:
    year: int
    month: int
    day: int

    @classmethod
    def validated(cls, year: int, month: int, day: int) -> HebrewDate:
        """Build a date from user input, rejecting impossible combinations."""
        if year < 1:
            raise InvalidHebrewDateInput(f"Year {year} is out of range")
        length = days_in_month(year, month)
        if not 1 <= day <= length:
            raise InvalidHebrewDateInput(
                f"Day {day} is out of range for month {month} of {year} ({length} days)"
            )
        return cls(year, month, day)

    @classmethod
    def from_civil(cls, civil: date) -> HebrewDate:
        pdate = PHebrewDate.from_pydate(civil)
        return cls(pdate.year, pdate.month, pdate.day)

    def to_library(self) -> PHebrewDate:
        try:
            return PHebrewDate(self.year, self.month, self.day)
        except ValueError as err:
            raise InvalidHebrewDateInput(str(err)) from err

    def to_civil(self) -> date:
        return self.to_library().to_pydate()

    def successor(self) -> HebrewDate:
        return HebrewDate.from_civil(self.to_civil() + timedelta(days=1))

    @property
    def leap(self) -> bool:
        return is_leap_year(self.year)

    def __str__(self) -> str:
        return format_hebrew_date(self)


def step_month(hdate: HebrewDate, delta: int) -> HebrewDate:
    """Move ``delta`` months, rolling the year at Tishrei.

    The day is clamped to the target month's length.
    """
    year = hdate.year
    ordinal = to_library_month(hdate.month, year) + delta
    while ordinal > months_in_year(year):
        ordinal -= months_in_year(year)
        year += 1
    while ordinal < 1:
        year -= 1
        ordinal += months_in_year(year)
    month = from_library_month(ordinal, year)
    return HebrewDate(year, month, min(hdate.day, days_in_month(year, month)))


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

_LETTERS = [
    (400, "ת"), (300, "ש"), (200, "ר"), (100, "ק"),
    (90, "צ"), (80, "פ"), (70, "ע"), (60, "ס"), (50, "נ"),
    (40, "מ"), (30, "ל"), (20, "כ"), (10, "י"),
    (9, "ט"), (8, "ח"), (7, "ז"), (6, "ו"), (5, "ה"),
    (4, "ד"), (3, "ג"), (2, "ב"), (1, "א"),
]


def int_to_hebrew(num: int) -> str:
    """Gematria with geresh/gershayim: 5 -> 'ה׳', 15 -> 'ט״ו', 784 -> 'תשפ״ד'."""
    tail = ""
    if num % 100 in (15, 16):
        # avoid spelling the divine name
        tail = "טו" if num % 100 == 15 else "טז"
        num -= num % 100

    result = ""
    for value, letter in _LETTERS:
        while num >= value:
            result += letter
            num -= value
    result += tail

    if len(result) > 1:
        return f"{result[:-1]}״{result[-1]}"
    return f"{result}׳"


_MONTH_NAMES = {
    1: "ניסן",
    2: "אייר",
    3: "סיון",
    4: "תמוז",
    5: "אב",
    6: "אלול",
    7: "תשרי",
    8: "חשון",
    9: "כסלו",
    10: "טבת",
    11: "שבט",
}


def month_name(month: int, year: int) -> str:
    if month == ADAR:
        return "אדר א׳" if is_leap_year(year) else "אדר"
    if month == ADAR_II:
        return "אדר ב׳"
    return _MONTH_NAMES.get(month, "")


def normalize_hebrew_punct(txt: str) -> str:
    """Geresh/gershayim to ASCII quotes."""
    return txt.replace("״", '"').replace("׳", "'")


def strip_nikud(txt: str) -> str:
    return "".join(
        ch for ch in unicodedata.normalize("NFD", txt) if unicodedata.category(ch) != "Mn"
    )


def format_hebrew_date(hdate: HebrewDate) -> str:
    text = (
        f"{int_to_hebrew(hdate.day)} {month_name(hdate.month, hdate.year)} "
        f"{int_to_hebrew(hdate.year % 1000)}"
    )
    return normalize_hebrew_punct(text)


# ---------------------------------------------------------------------------
# Holidays
# ---------------------------------------------------------------------------

class HolidayFlag(Flag):
    NONE = 0
    IL_ONLY = auto()
    CHUL_ONLY = auto()
    CHAG = auto()
    MINOR_FAST = auto()


@dataclass(frozen=True)
class HolidayEvent:
    name: str
    text: str
    flags: HolidayFlag = HolidayFlag.NONE
    candles: int | None = None


def is_taanis_bechoros(hdate: HebrewDate) -> bool:
    """Fast of the firstborn: 14 Nisan, or Thursday the 12th when the 14th is Shabbos."""
    if hdate.month != NISAN:
        return False
    erev_pesach = PHebrewDate(hdate.year, NISAN, 14).to_pydate()
    if erev_pesach.weekday() == 5:
        return hdate.day == 12
    return hdate.day == 14


def is_minor_fast(hdate: HebrewDate) -> bool:
    """Any fast except Yom Kippur and Tisha B'Av (even when pushed to 10 Av).

    pyluach has no entry for Ta'anis Bechoros, so it is checked here.
    """
    if hdate.month == 5 or (hdate.month == TISHREI and hdate.day == 10):
        return False
    if is_taanis_bechoros(hdate):
        return True
    return hdate.to_library().fast_day() is not None


def is_yom_tov(hdate: HebrewDate, in_israel: bool) -> bool:
    """Festival day on which melacha is forbidden."""
    festival = hdate.to_library().festival(israel=in_israel, include_working_days=False)
    return festival is not None


def hanukkah_candles(hdate: HebrewDate) -> int | None:
    """Candles lit on the evening that ends this date; 24 Kislev lights one."""
    kislev_24 = PHebrewDate(hdate.year, 9, 24).to_pydate()
    day_index = (hdate.to_civil() - kislev_24).days
    if 0 <= day_index <= 8:
        return day_index + 1
    return None


def hanukkah_label(candles: int) -> str | None:
    """Candle count to the day label: one candle gets none, k candles day k-1."""
    if candles <= 1:
        return None
    return f"חנוכה: יום {int_to_hebrew(candles - 1)}"


def holiday_events(hdate: HebrewDate) -> list[HolidayEvent]:
    """All events on ``hdate`` for both rule sets, flagged by region."""
    pdate = hdate.to_library()

    chul = (pdate.holiday(israel=False), pdate.holiday(israel=False, prefix_day=True))
    il = (pdate.holiday(israel=True), pdate.holiday(israel=True, prefix_day=True))
    if chul == il:
        variants = [(chul[0], False, HolidayFlag.NONE)]
    else:
        variants = [
            (il[0], True, HolidayFlag.IL_ONLY),
            (chul[0], False, HolidayFlag.CHUL_ONLY),
        ]

    events: list[HolidayEvent] = []
    minor_fast = is_minor_fast(hdate)
    candles = hanukkah_candles(hdate)

    for name, israel, flags in variants:
        if name is None:
            continue
        if pdate.festival(israel=israel, include_working_days=False) is not None:
            flags |= HolidayFlag.CHAG
        if minor_fast:
            flags |= HolidayFlag.MINOR_FAST
        text = strip_nikud(
            pdate.holiday(israel=israel, hebrew=True, prefix_day=True) or name
        )
        events.append(
            HolidayEvent(
                name=name,
                text=text,
                flags=flags,
                candles=candles if name == "Chanuka" else None,
            )
        )

    if candles == 1:
        events.append(HolidayEvent(name="Erev Chanuka", text="ערב חנוכה", candles=1))
    return events


def render_holidays(events: list[HolidayEvent], in_israel: bool) -> list[str]:
    """Holiday text for display in the selected region."""
    texts: list[str] = []
    for event in events:
        if in_israel and HolidayFlag.CHUL_ONLY in event.flags:
            continue
        if not in_israel and HolidayFlag.IL_ONLY in event.flags:
            continue
        if event.candles is not None:
            label = hanukkah_label(event.candles)
            if label is None:
                continue
            texts.append(label)
            continue
        texts.append(event.text)
    return texts


# ---------------------------------------------------------------------------
# Weekly portion and omer
# ---------------------------------------------------------------------------

def sedra_names(shabbos: date, in_israel: bool) -> list[str] | None:
    """Portion(s) read on ``shabbos``; None when a festival reading replaces it."""
    indices = parshios.getparsha(
        dates.GregorianDate(shabbos.year, shabbos.month, shabbos.day), israel=in_israel
    )
    if not indices:
        return None
    return [strip_nikud(parshios.PARSHIOS_HEBREW[i]) for i in indices]


def join_sedra(names: list[str] | None) -> str | None:
    """Portion title; a double portion is hyphenated, e.g. ויקהל-פקודי."""
    if not names:
        return None
    return f"פרשת {'-'.join(names)}"


def omer_day(hdate: HebrewDate) -> int | None:
    return OMER_DAY.get((hdate.month, hdate.day))


def omer_text(count: int) -> str:
    return normalize_hebrew_punct(f"היום {int_to_hebrew(count)} לעומר")
