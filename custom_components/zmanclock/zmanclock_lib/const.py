"""Domain constants shared by the zmanclock core."""
from __future__ import annotations

from datetime import timedelta
from typing import Final

# Sun altitude (degrees below the horizon) for the angle-based zmanim
ALOS_DEGREES: Final = 16.1
MISHEYAKIR_DEGREES: Final = 10.2
TZEIS_DEGREES: Final = 8.5
GEOMETRIC_ZENITH: Final = 90.0

RABBEINU_TAM_OFFSET: Final = timedelta(minutes=72)
MINCHA_GEDOLA_FLOOR: Final = timedelta(minutes=30)
DEFAULT_CANDLE_LIGHTING_OFFSET: Final = 18  # minutes before sunset

# Virtual clock
SPEED_LEVELS: Final[tuple[int, ...]] = (-100, -10, 0, 10, 100)
SMOOTH_ANIMATION_LIMIT: Final = 10
DAY_MS: Final = 86_400_000
DEFAULT_FINE_TICK_MS: Final = 10
DEFAULT_RENDER_INTERVAL: Final = 1.0  # seconds

CHALAKIM_PER_MINUTE: Final = 18

# Rough box around Israel, used only as the default for the region option
ISRAEL_BOUNDS: Final = (29.45, 33.35, 34.2, 35.9)  # lat_min, lat_max, lon_min, lon_max

HEBREW_WEEKDAYS: Final[list[str]] = [
    "ראשון",
    "שני",
    "שלישי",
    "רביעי",
    "חמישי",
    "שישי",
    "שבת",
]

# (month, day) -> omer day; months are Nisan-first
OMER_DAY: Final[dict[tuple[int, int], int]] = {
    **{(1, d): d - 15 for d in range(16, 31)},
    **{(2, d): d + 15 for d in range(1, 30)},
    **{(3, d): d + 44 for d in range(1, 6)},
}
