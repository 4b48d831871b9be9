"""Seasonal hours (sha'os zmaniyos) and the clock hand that shows them."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .const import CHALAKIM_PER_MINUTE
from .zmanim_engine import ZmanimSet


@dataclass
class SeasonalHourState:
    """Hand rotation memory; lives for the whole session."""

    previous_angle: float | None = None
    accumulated_rotation: float = 0.0


@dataclass(frozen=True)
class SeasonalTime:
    is_daytime: bool
    seasonal_hours: float
    hour_length: timedelta


@dataclass(frozen=True)
class SeasonalProjection:
    angle: float
    accumulated_rotation: float
    is_daytime: bool
    seasonal_hours: float
    hour_length: timedelta


def seasonal_time(instant: datetime, zmanim: ZmanimSet) -> SeasonalTime:
    """Where ``instant`` sits in the current day or night, in seasonal hours."""
    if zmanim.sunrise <= instant < zmanim.sunset:
        span = zmanim.sunset - zmanim.sunrise
        elapsed = instant - zmanim.sunrise
        is_daytime = True
    elif instant >= zmanim.sunset:
        span = zmanim.next_sunrise - zmanim.sunset
        elapsed = instant - zmanim.sunset
        is_daytime = False
    else:
        span = zmanim.sunrise - zmanim.prev_sunset
        # wrap in case the instant precedes last night's sunset
        elapsed = (instant - zmanim.prev_sunset + span) % span
        is_daytime = False

    hour_length = span / 12
    return SeasonalTime(
        is_daytime=is_daytime,
        seasonal_hours=elapsed / hour_length,
        hour_length=hour_length,
    )


def hand_angle(is_daytime: bool, seasonal_hours: float) -> float:
    """Angle on the face: day on one semicircle, night on the other."""
    raw = seasonal_hours / 12 * 180
    if not is_daytime:
        raw += 180
    return (360 - raw + 180) % 360


def project(
    instant: datetime, zmanim: ZmanimSet, state: SeasonalHourState
) -> SeasonalProjection:
    """Advance the hand to ``instant``.

    The accumulated rotation moves by the shortest signed delta from the
    previous angle, so the hand never jumps across the 0/360 seam.
    """
    position = seasonal_time(instant, zmanim)
    angle = hand_angle(position.is_daytime, position.seasonal_hours)

    if state.previous_angle is None:
        state.accumulated_rotation = angle
    else:
        delta = angle - state.previous_angle
        if delta > 180:
            delta -= 360
        elif delta <= -180:
            delta += 360
        state.accumulated_rotation += delta
    state.previous_angle = angle

    return SeasonalProjection(
        angle=angle,
        accumulated_rotation=state.accumulated_rotation,
        is_daytime=position.is_daytime,
        seasonal_hours=position.seasonal_hours,
        hour_length=position.hour_length,
    )


def zman_dial_angle(instant: datetime, zmanim: ZmanimSet) -> float:
    """Polar angle of a zman marker on the face, in screen degrees."""
    position = seasonal_time(instant, zmanim)
    theta = position.seasonal_hours / 12 * -180
    if not position.is_daytime:
        theta -= 180
    return theta % 360


def format_seasonal_time(position: SeasonalTime | SeasonalProjection) -> str:
    """Seasonal time as ``h:mm:chalakim`` with a day/night label.

    A seasonal minute is 18 chalakim.
    """
    hours = int(position.seasonal_hours)
    fraction_minutes = (position.seasonal_hours - hours) * 60
    minutes = int(fraction_minutes)
    chalakim = int((fraction_minutes - minutes) * CHALAKIM_PER_MINUTE)
    label = "ביום" if position.is_daytime else "בלילה"
    return f"{hours}:{minutes:02d}:{chalakim:02d} {label}"
