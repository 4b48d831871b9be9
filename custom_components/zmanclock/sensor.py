# custom_components/zmanclock/sensor.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .zmanclock_lib.hebrew_calendar import format_hebrew_date
from .zmanclock_lib.seasonal_clock import format_seasonal_time, zman_dial_angle
from .zmanclock_lib.zmanim_engine import Zman
from .const import DOMAIN
from .device import ZmanClockDevice, ZmanClockZmanDevice
from .runtime import ZmanClockRuntime

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ZmanSensorDescription(SensorEntityDescription):
    """One timestamp sensor per zman."""
    zman: Zman
    hebrew: str


ZMAN_DESCRIPTIONS: Final[list[ZmanSensorDescription]] = [
    ZmanSensorDescription(
        key="alos", name="Alos Hashachar", icon="mdi:weather-sunset-up",
        zman=Zman.ALOS, hebrew="עלות השחר",
    ),
    ZmanSensorDescription(
        key="misheyakir", name="Misheyakir", icon="mdi:weather-sunset-up",
        zman=Zman.MISHEYAKIR, hebrew="משיכיר",
    ),
    ZmanSensorDescription(
        key="netz", name="Netz Hachamah", icon="mdi:weather-sunny",
        zman=Zman.SUNRISE, hebrew="הנץ החמה",
    ),
    ZmanSensorDescription(
        key="sof_zman_krias_shma_mga", name="Sof Zman Krias Shma MGA", icon="mdi:book-open-variant",
        zman=Zman.SHEMA_MGA, hebrew='סוף זמן ק"ש מג"א',
    ),
    ZmanSensorDescription(
        key="sof_zman_krias_shma_gra", name="Sof Zman Krias Shma GRA", icon="mdi:book-open-variant",
        zman=Zman.SHEMA_GRA, hebrew='סוף זמן ק"ש גר"א',
    ),
    ZmanSensorDescription(
        key="sof_zman_tefilah_gra", name="Sof Zman Tefilah GRA", icon="mdi:hands-pray",
        zman=Zman.TEFILA_GRA, hebrew='סוף זמן תפילה גר"א',
    ),
    ZmanSensorDescription(
        key="chatzos_hayom", name="Chatzos Hayom", icon="mdi:clock-time-twelve-outline",
        zman=Zman.CHATZOS, hebrew="חצות היום",
    ),
    ZmanSensorDescription(
        key="mincha_gedola", name="Mincha Gedola", icon="mdi:clock-time-one-outline",
        zman=Zman.MINCHA_GEDOLA, hebrew="מנחה גדולה",
    ),
    ZmanSensorDescription(
        key="mincha_ketana", name="Mincha Ketana", icon="mdi:clock-time-three-outline",
        zman=Zman.MINCHA_KETANA, hebrew="מנחה קטנה",
    ),
    ZmanSensorDescription(
        key="plag_hamincha", name="Plag Hamincha", icon="mdi:clock-time-four-outline",
        zman=Zman.PLAG_HAMINCHA, hebrew="פלג המנחה",
    ),
    ZmanSensorDescription(
        key="shkia", name="Shkias Hachamah", icon="mdi:weather-sunset-down",
        zman=Zman.SUNSET, hebrew="שקיעת החמה",
    ),
    ZmanSensorDescription(
        key="tzeis", name="Tzeis Hakochavim", icon="mdi:weather-night",
        zman=Zman.TZEIS, hebrew="צאת הכוכבים",
    ),
    ZmanSensorDescription(
        key="rabbeinu_tam", name="Rabbeinu Tam", icon="mdi:weather-night",
        zman=Zman.RABBEINU_TAM, hebrew='ר"ת',
    ),
    ZmanSensorDescription(
        key="chatzos_haleila", name="Chatzos Haleila", icon="mdi:clock-time-twelve",
        zman=Zman.CHATZOS_LAYLA, hebrew="חצות הלילה",
    ),
]


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    runtime: ZmanClockRuntime = hass.data[DOMAIN][entry.entry_id]

    entities: list[SensorEntity] = [
        ZmanTimeSensor(runtime, desc) for desc in ZMAN_DESCRIPTIONS
    ]
    entities += [
        SeasonalHourSensor(runtime),
        HebrewDateSensor(runtime),
        DisplayedTimeSensor(runtime),
    ]
    async_add_entities(entities)


class ZmanTimeSensor(ZmanClockZmanDevice, SensorEntity):
    """Timestamp of one zman for the displayed day."""

    _attr_device_class = SensorDeviceClass.TIMESTAMP
    entity_description: ZmanSensorDescription

    def __init__(self, runtime: ZmanClockRuntime, description: ZmanSensorDescription) -> None:
        super().__init__(runtime)
        self.entity_description = description
        self._attr_unique_id = f"zmanclock_{description.key}"
        self.entity_id = f"sensor.zmanclock_{description.zman.value}"

    @property
    def native_value(self) -> datetime | None:
        frame = self.frame
        if frame is None:
            return None
        return frame.zmanim[self.entity_description.zman]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        frame = self.frame
        if frame is None:
            return {}
        moment = frame.zmanim[self.entity_description.zman]
        local = self._local(moment)
        return {
            "Hebrew_Name": self.entity_description.hebrew,
            "Simple": self._format_simple_time(local),
            "Dial_Angle": round(zman_dial_angle(moment, frame.zmanim), 2),
        }


class SeasonalHourSensor(ZmanClockDevice, SensorEntity):
    """שעה זמנית: the hand position in seasonal hours since sunrise or sunset."""

    _attr_name = "Seasonal Hour"
    _attr_icon = "mdi:clock-outline"
    _attr_native_unit_of_measurement = "h"
    _attr_unique_id = "zmanclock_seasonal_hour"

    def __init__(self, runtime: ZmanClockRuntime) -> None:
        super().__init__(runtime)
        self.entity_id = "sensor.zmanclock_seasonal_hour"

    @property
    def native_value(self) -> float | None:
        frame = self.frame
        if frame is None:
            return None
        return round(frame.projection.seasonal_hours, 4)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        frame = self.frame
        if frame is None:
            return {}
        projection = frame.projection
        return {
            "Formatted": format_seasonal_time(projection),
            "Is_Daytime": projection.is_daytime,
            "Hour_Length_Minutes": round(projection.hour_length.total_seconds() / 60, 2),
            "Hand_Angle": round(projection.angle, 3),
            "Accumulated_Rotation": round(projection.accumulated_rotation, 3),
            "Day_Hour_Minutes": round(frame.zmanim.day_hour.total_seconds() / 60, 2),
        }


class HebrewDateSensor(ZmanClockDevice, SensorEntity):
    """Hebrew date of the displayed instant, with the day's calendar facts."""

    _attr_name = "Hebrew Date"
    _attr_icon = "mdi:calendar-star"
    _attr_unique_id = "zmanclock_hebrew_date"

    def __init__(self, runtime: ZmanClockRuntime) -> None:
        super().__init__(runtime)
        self.entity_id = "sensor.zmanclock_hebrew_date"

    @property
    def native_value(self) -> str | None:
        frame = self.frame
        if frame is None:
            return None
        return format_hebrew_date(frame.hebrew_date)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        frame = self.frame
        if frame is None:
            return {}
        facts = frame.facts
        hdate = frame.hebrew_date
        attrs: dict[str, Any] = {
            "Year": hdate.year,
            "Month": hdate.month,
            "Day": hdate.day,
            "Day_Of_Week": frame.day_of_week.text,
            "Holidays": list(facts.holidays),
            "Sedra": facts.sedra,
            "Omer_Count": facts.omer_count,
            "Omer_Text": facts.omer_text,
            "Yom_Tov_Tomorrow": facts.yom_tov_tomorrow,
            "Minor_Fast": facts.special.minor_fast,
            "Biur_Chametz": facts.special.biur_chametz,
            "Candle_Lighting": None,
            "Biur_Chametz_Deadline": None,
        }
        if facts.candle_lighting is not None:
            attrs["Candle_Lighting"] = self._format_simple_time(self._local(facts.candle_lighting))
        if facts.biur_chametz_deadline is not None:
            attrs["Biur_Chametz_Deadline"] = self._format_simple_time(
                self._local(facts.biur_chametz_deadline)
            )
        return attrs


class DisplayedTimeSensor(ZmanClockDevice, SensorEntity):
    """The instant the clock is showing, after playback offsets."""

    _attr_name = "Displayed Time"
    _attr_icon = "mdi:clock-fast"
    _attr_device_class = SensorDeviceClass.TIMESTAMP
    _attr_unique_id = "zmanclock_displayed_time"

    def __init__(self, runtime: ZmanClockRuntime) -> None:
        super().__init__(runtime)
        self.entity_id = "sensor.zmanclock_displayed_time"

    @property
    def native_value(self) -> datetime | None:
        frame = self.frame
        if frame is None:
            return None
        return frame.displayed_instant

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        clock = self._runtime.clock
        attrs: dict[str, Any] = {
            "Speed": clock.speed,
            "Days_Ahead": clock.days_ahead,
            "Smooth_Animation": clock.smooth_animation,
        }
        frame = self.frame
        if frame is not None:
            attrs["Civil_Date"] = frame.civil_date.isoformat()
            attrs["Simple"] = self._format_simple_time(self._local(frame.displayed_instant))
        return attrs
