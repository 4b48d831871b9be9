from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import FakeOracle, synthetic_sun
from zmanclock_lib.exceptions import OracleUnavailableError, PolarRegionError
from zmanclock_lib.location import Location, TimeZoneContext
from zmanclock_lib.zmanim_engine import (
    Zman,
    ZmanimCache,
    compute_zmanim,
    derive_zmanim,
)

UTC = timezone.utc
NOON = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)


def test_derived_zmanim_follow_the_day_order() -> None:
    zmanim = derive_zmanim(synthetic_sun(), NOON)

    ordered = [
        zmanim.alos,
        zmanim.misheyakir,
        zmanim.sunrise,
        zmanim.shema_gra,
        zmanim.tefila_gra,
        zmanim.chatzos,
        zmanim.mincha_gedola,
        zmanim.mincha_ketana,
        zmanim.plag_hamincha,
        zmanim.sunset,
        zmanim.tzeis,
        zmanim.rabbeinu_tam,
    ]
    assert ordered == sorted(ordered)
    assert zmanim.prev_sunset < zmanim.sunrise
    assert zmanim.next_sunrise > zmanim.sunset


def test_fractional_zmanim_on_a_twelve_hour_day() -> None:
    zmanim = derive_zmanim(synthetic_sun(), NOON)

    assert zmanim.day_hour == timedelta(hours=1)
    assert zmanim.shema_gra == datetime(2024, 3, 20, 9, 0, tzinfo=UTC)
    assert zmanim.tefila_gra == datetime(2024, 3, 20, 10, 0, tzinfo=UTC)
    assert zmanim.mincha_gedola == datetime(2024, 3, 20, 12, 30, tzinfo=UTC)
    assert zmanim.mincha_ketana == datetime(2024, 3, 20, 15, 30, tzinfo=UTC)
    assert zmanim.plag_hamincha == datetime(2024, 3, 20, 16, 45, tzinfo=UTC)
    assert zmanim.rabbeinu_tam == datetime(2024, 3, 20, 19, 12, tzinfo=UTC)


def test_shema_mga_uses_the_alos_to_setting_day() -> None:
    zmanim = derive_zmanim(synthetic_sun(), NOON)

    # 04:30 -> 19:30 is fifteen hours, so an MGA hour is 75 minutes
    assert zmanim.mga_day_hour == timedelta(minutes=75)
    assert zmanim.shema_mga == datetime(2024, 3, 20, 8, 15, tzinfo=UTC)


def test_chatzos_is_exact_midpoint() -> None:
    sun = synthetic_sun(sunrise=time(5, 47, 13), sunset=time(19, 2, 41))
    zmanim = derive_zmanim(sun, NOON)

    assert zmanim.chatzos == zmanim.sunrise + (zmanim.sunset - zmanim.sunrise) / 2
    assert zmanim.sunrise < zmanim.chatzos < zmanim.sunset


def test_mincha_gedola_floor_on_a_short_day() -> None:
    sun = synthetic_sun(sunrise=time(11, 30), sunset=time(12, 30))
    zmanim = derive_zmanim(sun, NOON)

    assert zmanim.day_hour == timedelta(minutes=5)
    assert zmanim.mincha_gedola - zmanim.chatzos == timedelta(minutes=30)


def test_mincha_gedola_half_hour_on_a_long_day() -> None:
    sun = synthetic_sun(sunrise=time(5, 0), sunset=time(19, 0))
    zmanim = derive_zmanim(sun, NOON)

    assert zmanim.mincha_gedola - zmanim.chatzos == timedelta(minutes=35)


def test_chatzos_layla_before_rabbeinu_tam_uses_last_night() -> None:
    morning = datetime(2024, 3, 20, 10, 0, tzinfo=UTC)
    zmanim = derive_zmanim(synthetic_sun(), morning)

    assert zmanim.chatzos_layla == datetime(2024, 3, 20, 0, 0, tzinfo=UTC)


def test_chatzos_layla_after_rabbeinu_tam_uses_coming_night() -> None:
    evening = datetime(2024, 3, 20, 19, 12, tzinfo=UTC)  # exactly rabbeinu tam
    zmanim = derive_zmanim(synthetic_sun(), evening)

    assert zmanim.chatzos_layla == datetime(2024, 3, 21, 0, 0, tzinfo=UTC)


def test_items_follow_zman_order() -> None:
    zmanim = derive_zmanim(synthetic_sun(), NOON)

    names = [zman for zman, _ in zmanim.items()]
    assert names == list(Zman)
    assert zmanim[Zman.TZEIS] == zmanim.tzeis
    assert zmanim["sunset"] == zmanim.sunset


def test_missing_event_raises_polar_region_error(utc_zone: TimeZoneContext) -> None:
    oracle = FakeOracle(missing={"tzeis"})
    location = Location(70.0, 20.0)

    with pytest.raises(PolarRegionError) as excinfo:
        compute_zmanim(location, utc_zone, NOON, oracle=oracle)
    assert excinfo.value.missing == "tzeis"
    assert excinfo.value.latitude == 70.0


def test_backend_failure_is_not_polar(utc_zone: TimeZoneContext) -> None:
    oracle = FakeOracle()
    oracle.fail = True

    with pytest.raises(OracleUnavailableError):
        compute_zmanim(Location(0, 0), utc_zone, NOON, oracle=oracle)


def test_cache_reuses_solar_day_within_civil_day(utc_zone: TimeZoneContext) -> None:
    oracle = FakeOracle()
    cache = ZmanimCache(lambda location, timezone: oracle)
    location = Location(0, 0)

    cache.zmanim(location, utc_zone, datetime(2024, 3, 20, 1, 0, tzinfo=UTC))
    calls = oracle.calls
    cache.zmanim(location, utc_zone, datetime(2024, 3, 20, 23, 59, tzinfo=UTC))
    assert oracle.calls == calls

    later = cache.zmanim(location, utc_zone, datetime(2024, 3, 21, 0, 1, tzinfo=UTC))
    assert oracle.calls == calls * 2
    assert later.civil_date == date(2024, 3, 21)


def test_cache_recomputes_on_location_change(utc_zone: TimeZoneContext) -> None:
    oracle = FakeOracle()
    cache = ZmanimCache(lambda location, timezone: oracle)

    cache.zmanim(Location(0, 0), utc_zone, NOON)
    calls = oracle.calls
    cache.zmanim(Location(10, 0), utc_zone, NOON)
    assert oracle.calls == calls * 2


def test_jerusalem_end_to_end(jerusalem: Location, jerusalem_zone: TimeZoneContext) -> None:
    tz = ZoneInfo("Asia/Jerusalem")
    instant = datetime(2024, 4, 23, 12, 0, tzinfo=tz)

    zmanim = compute_zmanim(jerusalem, jerusalem_zone, instant)

    assert zmanim.civil_date == date(2024, 4, 23)
    assert zmanim.alos < zmanim.misheyakir < zmanim.sunrise
    assert zmanim.sunset < zmanim.tzeis
    assert zmanim.chatzos == zmanim.sunrise + (zmanim.sunset - zmanim.sunrise) / 2

    sunrise = zmanim.sunrise.astimezone(tz)
    sunset = zmanim.sunset.astimezone(tz)
    assert sunrise.date() == date(2024, 4, 23)
    assert time(5, 30) < sunrise.time() < time(6, 20)
    assert time(18, 50) < sunset.time() < time(19, 30)
    assert zmanim.prev_sunset.astimezone(tz).date() == date(2024, 4, 22)
    assert zmanim.next_sunrise.astimezone(tz).date() == date(2024, 4, 24)


def test_midnight_sun_is_polar() -> None:
    svalbard = Location(78.22, 15.65)
    zone = TimeZoneContext("Arctic/Longyearbyen")
    instant = datetime(2024, 6, 21, 12, 0, tzinfo=ZoneInfo("Arctic/Longyearbyen"))

    with pytest.raises(PolarRegionError):
        compute_zmanim(svalbard, zone, instant)
