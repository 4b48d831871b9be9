"""Constants for the ZmanClock integration."""
from __future__ import annotations

from typing import Final

DOMAIN: Final = "zmanclock"
NAME: Final = "ZmanClock"

# hass.data keys
CONFIG_KEY: Final = "config"

# dispatcher signal, formatted with the entry id
SIGNAL_FRAME: Final = "zmanclock_frame_{}"

NOTIFICATION_ID: Final = "zmanclock_unsupported_location"

SERVICE_JUMP_TO_DATE: Final = "jump_to_date"
SERVICE_STEP_MONTH: Final = "step_month"
ATTR_DATE: Final = "date"
ATTR_HEBREW_YEAR: Final = "hebrew_year"
ATTR_HEBREW_MONTH: Final = "hebrew_month"
ATTR_HEBREW_DAY: Final = "hebrew_day"
ATTR_MONTHS: Final = "months"
