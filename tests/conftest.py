from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone

import pytest

from zmanclock_lib.astronomy import RISING
from zmanclock_lib.const import ALOS_DEGREES, MISHEYAKIR_DEGREES
from zmanclock_lib.exceptions import OracleUnavailableError
from zmanclock_lib.location import Location, TimeZoneContext
from zmanclock_lib.zmanim_engine import SolarDay

UTC = timezone.utc


class FakeOracle:
    """Same sun times every day, in UTC: 06:00 sunrise, 18:00 sunset."""

    def __init__(self, *, missing: set[str] | None = None) -> None:
        self.times = {
            "sunrise": time(6, 0),
            "sunset": time(18, 0),
            "alos": time(4, 30),
            "mga_end": time(19, 30),
            "misheyakir": time(5, 10),
            "tzeis": time(18, 40),
        }
        self.missing = missing or set()
        self.fail = False
        self.calls = 0

    def _at(self, day: date, what: str) -> datetime | None:
        self.calls += 1
        if self.fail:
            raise OracleUnavailableError("backend down")
        if what in self.missing:
            return None
        return datetime.combine(day, self.times[what], tzinfo=UTC)

    def rise_set(self, day: date, direction: int) -> datetime | None:
        return self._at(day, "sunrise" if direction == RISING else "sunset")

    def altitude_crossing(self, day: date, direction: int, degrees: float) -> datetime | None:
        if degrees == ALOS_DEGREES:
            return self._at(day, "alos" if direction == RISING else "mga_end")
        if degrees == MISHEYAKIR_DEGREES:
            return self._at(day, "misheyakir")
        return self._at(day, "tzeis")


class FakeScheduler:
    """Records interval jobs; ``fire`` runs the active ones by hand."""

    def __init__(self) -> None:
        self.jobs: list[dict] = []

    def schedule_interval(self, callback: Callable[[], None], period: float):
        job = {"callback": callback, "period": period, "active": True}
        self.jobs.append(job)

        def cancel() -> None:
            job["active"] = False

        return cancel

    @property
    def active(self) -> list[dict]:
        return [job for job in self.jobs if job["active"]]

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for job in self.active:
                job["callback"]()


def synthetic_sun(
    day: date = date(2024, 3, 20),
    sunrise: time = time(6, 0),
    sunset: time = time(18, 0),
) -> SolarDay:
    def at(d: date, t: time) -> datetime:
        return datetime.combine(d, t, tzinfo=UTC)

    return SolarDay(
        civil_date=day,
        sunrise=at(day, sunrise),
        sunset=at(day, sunset),
        next_sunrise=at(day + timedelta(days=1), sunrise),
        prev_sunset=at(day - timedelta(days=1), sunset),
        alos=at(day, time(4, 30)),
        mga_end=at(day, time(19, 30)),
        misheyakir=at(day, time(5, 10)),
        tzeis=at(day, time(18, 40)),
    )


@pytest.fixture
def fake_oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def utc_zone() -> TimeZoneContext:
    return TimeZoneContext("UTC")


@pytest.fixture
def jerusalem() -> Location:
    return Location(latitude=31.78, longitude=35.22, elevation=0)


@pytest.fixture
def jerusalem_zone() -> TimeZoneContext:
    return TimeZoneContext("Asia/Jerusalem")
