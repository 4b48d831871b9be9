from __future__ import annotations

from datetime import date, timedelta

import pytest
from pyluach.hebrewcal import Year

from zmanclock_lib.exceptions import InvalidHebrewDateInput
from zmanclock_lib.hebrew_calendar import (
    HebrewDate,
    HolidayEvent,
    HolidayFlag,
    days_in_month,
    format_hebrew_date,
    from_library_month,
    hanukkah_candles,
    hanukkah_label,
    holiday_events,
    int_to_hebrew,
    is_leap_year,
    is_minor_fast,
    is_taanis_bechoros,
    is_yom_tov,
    join_sedra,
    omer_day,
    omer_text,
    render_holidays,
    step_month,
    to_library_month,
)

LEAP = 5784
PLAIN = 5785


def test_leap_years() -> None:
    assert is_leap_year(LEAP)
    assert not is_leap_year(PLAIN)


def test_adar_ii_only_in_leap_years() -> None:
    assert HebrewDate.validated(LEAP, 13, 1) == HebrewDate(LEAP, 13, 1)
    with pytest.raises(InvalidHebrewDateInput):
        HebrewDate.validated(PLAIN, 13, 1)


def test_day_beyond_month_length_is_rejected() -> None:
    assert days_in_month(LEAP, 1) == 30
    assert days_in_month(LEAP, 2) == 29
    with pytest.raises(InvalidHebrewDateInput):
        HebrewDate.validated(LEAP, 2, 30)
    with pytest.raises(InvalidHebrewDateInput):
        HebrewDate.validated(LEAP, 14, 1)
    with pytest.raises(InvalidHebrewDateInput):
        HebrewDate.validated(LEAP, 1, 0)


def test_invalid_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        HebrewDate.validated(PLAIN, 13, 1)


@pytest.mark.parametrize(
    ("month", "year", "ordinal"),
    [
        (7, PLAIN, 1),   # Tishrei opens the year
        (12, PLAIN, 6),  # Adar
        (1, PLAIN, 7),   # Nisan
        (6, PLAIN, 12),  # Elul
        (12, LEAP, 6),   # Adar I
        (13, LEAP, 7),   # Adar II
        (1, LEAP, 8),
        (6, LEAP, 13),
    ],
)
def test_month_mapping_at_the_pivots(month: int, year: int, ordinal: int) -> None:
    assert to_library_month(month, year) == ordinal
    assert from_library_month(ordinal, year) == month


@pytest.mark.parametrize("year", [LEAP, PLAIN])
def test_month_mapping_matches_library_year_order(year: int) -> None:
    months = [month.month for month in Year(year).itermonths()]

    for ordinal, month in enumerate(months, start=1):
        assert to_library_month(month, year) == ordinal
        assert from_library_month(ordinal, year) == month


def test_month_mapping_rejects_adar_ii_in_plain_year() -> None:
    with pytest.raises(InvalidHebrewDateInput):
        to_library_month(13, PLAIN)
    with pytest.raises(InvalidHebrewDateInput):
        from_library_month(13, PLAIN)


def test_step_month_rolls_the_year_at_tishrei() -> None:
    assert step_month(HebrewDate(LEAP, 6, 10), 1) == HebrewDate(PLAIN, 7, 10)
    assert step_month(HebrewDate(PLAIN, 7, 10), -1) == HebrewDate(LEAP, 6, 10)


def test_step_month_through_adar() -> None:
    assert step_month(HebrewDate(LEAP, 12, 5), 1) == HebrewDate(LEAP, 13, 5)
    assert step_month(HebrewDate(LEAP, 13, 5), 1) == HebrewDate(LEAP, 1, 5)
    assert step_month(HebrewDate(PLAIN, 12, 5), 1) == HebrewDate(PLAIN, 1, 5)
    assert step_month(HebrewDate(PLAIN, 1, 5), -1) == HebrewDate(PLAIN, 12, 5)


def test_step_month_clamps_the_day() -> None:
    assert step_month(HebrewDate(LEAP, 1, 30), 1) == HebrewDate(LEAP, 2, 29)


def test_civil_conversion() -> None:
    assert HebrewDate.from_civil(date(2024, 4, 23)) == HebrewDate(LEAP, 1, 15)
    assert HebrewDate(LEAP, 1, 15).to_civil() == date(2024, 4, 23)
    assert HebrewDate(LEAP, 1, 15).successor() == HebrewDate(LEAP, 1, 16)
    assert HebrewDate(LEAP, 6, 29).successor() == HebrewDate(PLAIN, 7, 1)


@pytest.mark.parametrize(
    ("num", "expected"),
    [(5, "ה׳"), (15, "ט״ו"), (16, "ט״ז"), (30, "ל׳"), (115, "קט״ו"), (784, "תשפ״ד")],
)
def test_int_to_hebrew(num: int, expected: str) -> None:
    assert int_to_hebrew(num) == expected


def test_format_hebrew_date() -> None:
    assert format_hebrew_date(HebrewDate(LEAP, 1, 15)) == 'ט"ו ניסן תשפ"ד'
    assert str(HebrewDate(LEAP, 12, 1)) == "א' אדר א' תשפ\"ד"


@pytest.mark.parametrize(
    ("month", "day", "expected"),
    [(1, 15, None), (1, 16, 1), (2, 1, 16), (3, 5, 49), (3, 6, None)],
)
def test_omer_boundaries(month: int, day: int, expected: int | None) -> None:
    assert omer_day(HebrewDate(LEAP, month, day)) == expected


def test_omer_text() -> None:
    assert omer_text(1) == "היום א' לעומר"
    assert omer_text(33) == 'היום ל"ג לעומר'


def test_double_portion_gets_a_hyphen() -> None:
    assert join_sedra(["ויקהל", "פקודי"]) == "פרשת ויקהל-פקודי"
    assert join_sedra(["בהר", "בחוקותי"]) == "פרשת בהר-בחוקותי"
    assert join_sedra(["חקת", "בלק"]) == "פרשת חקת-בלק"
    assert join_sedra(["בראשית"]) == "פרשת בראשית"
    assert join_sedra(None) is None


def test_hanukkah_labels() -> None:
    assert hanukkah_label(1) is None
    assert hanukkah_label(2) == "חנוכה: יום א׳"
    assert hanukkah_label(9) == "חנוכה: יום ח׳"


def test_hanukkah_candles_by_date() -> None:
    first_day = HebrewDate(PLAIN, 9, 25)
    last_day = HebrewDate.from_civil(first_day.to_civil() + timedelta(days=7))

    assert hanukkah_candles(HebrewDate(PLAIN, 9, 23)) is None
    assert hanukkah_candles(HebrewDate(PLAIN, 9, 24)) == 1
    assert hanukkah_candles(first_day) == 2
    assert hanukkah_candles(last_day) == 9
    assert hanukkah_candles(HebrewDate.from_civil(last_day.to_civil() + timedelta(days=1))) is None


def test_render_holidays_filters_by_region() -> None:
    events = [
        HolidayEvent("Pesach", "ח׳ פסח", HolidayFlag.CHUL_ONLY | HolidayFlag.CHAG),
        HolidayEvent("Pesach", "ז׳ פסח", HolidayFlag.IL_ONLY),
        HolidayEvent("Erev Chanuka", "ערב חנוכה", candles=1),
        HolidayEvent("Chanuka", "חנוכה", candles=4),
    ]

    assert render_holidays(events, in_israel=True) == ["ז׳ פסח", "חנוכה: יום ג׳"]
    assert render_holidays(events, in_israel=False) == ["ח׳ פסח", "חנוכה: יום ג׳"]


def test_eighth_day_of_pesach_is_diaspora_only() -> None:
    eighth = HebrewDate(LEAP, 1, 22)

    events = holiday_events(eighth)
    assert events
    assert all(HolidayFlag.CHUL_ONLY in event.flags for event in events)
    assert render_holidays(events, in_israel=True) == []
    assert render_holidays(events, in_israel=False)


def test_civil_days_are_not_holidays() -> None:
    # Yom Ha'atzmaut 5784 was observed on 6 Iyar; Yom Yerushalayim is 28 Iyar
    assert HebrewDate(LEAP, 2, 6).to_civil() == date(2024, 5, 14)
    assert holiday_events(HebrewDate(LEAP, 2, 6)) == []
    assert holiday_events(HebrewDate(LEAP, 2, 28)) == []


def test_first_day_of_pesach_is_a_chag() -> None:
    events = holiday_events(HebrewDate(LEAP, 1, 15))

    assert events
    assert all(HolidayFlag.CHAG in event.flags for event in events)


def test_yom_tov_detection() -> None:
    assert is_yom_tov(HebrewDate(LEAP, 1, 15), in_israel=True)
    assert not is_yom_tov(HebrewDate(LEAP, 1, 17), in_israel=True)
    assert is_yom_tov(HebrewDate(LEAP, 1, 16), in_israel=False)
    assert not is_yom_tov(HebrewDate(LEAP, 1, 16), in_israel=True)


def test_minor_fasts() -> None:
    assert is_minor_fast(HebrewDate(LEAP, 4, 17))
    assert not is_minor_fast(HebrewDate(PLAIN, 7, 10))
    assert not is_minor_fast(HebrewDate(LEAP, 5, 9))
    assert not is_minor_fast(HebrewDate(LEAP, 4, 18))


def test_taanis_bechoros_is_a_minor_fast() -> None:
    # 14 Nisan 5784 was a Monday
    assert HebrewDate(LEAP, 1, 14).to_civil() == date(2024, 4, 22)
    assert is_taanis_bechoros(HebrewDate(LEAP, 1, 14))
    assert is_minor_fast(HebrewDate(LEAP, 1, 14))
    assert not is_minor_fast(HebrewDate(LEAP, 1, 12))

    # 14 Nisan 5785 was Shabbos, so the fast moved to Thursday the 12th
    assert HebrewDate(PLAIN, 1, 12).to_civil() == date(2025, 4, 10)
    assert is_minor_fast(HebrewDate(PLAIN, 1, 12))
    assert not is_minor_fast(HebrewDate(PLAIN, 1, 13))
    assert not is_minor_fast(HebrewDate(PLAIN, 1, 14))
