# custom_components/zmanclock/button.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from homeassistant.components.button import ButtonEntity, ButtonEntityDescription
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .device import ZmanClockControlDevice
from .runtime import ZmanClockRuntime


@dataclass(frozen=True, kw_only=True)
class ClockButtonDescription(ButtonEntityDescription):
    press_fn: Callable[[ZmanClockRuntime], None]


DESCRIPTIONS: Final[list[ClockButtonDescription]] = [
    ClockButtonDescription(
        key="previous_day",
        name="Previous Day",
        icon="mdi:chevron-left",
        press_fn=lambda runtime: runtime.async_shift_days(-1),
    ),
    ClockButtonDescription(
        key="next_day",
        name="Next Day",
        icon="mdi:chevron-right",
        press_fn=lambda runtime: runtime.async_shift_days(1),
    ),
    ClockButtonDescription(
        key="slower",
        name="Slower",
        icon="mdi:rewind",
        press_fn=lambda runtime: runtime.async_step_speed(-1),
    ),
    ClockButtonDescription(
        key="faster",
        name="Faster",
        icon="mdi:fast-forward",
        press_fn=lambda runtime: runtime.async_step_speed(1),
    ),
    ClockButtonDescription(
        key="reset",
        name="Back To Now",
        icon="mdi:restore",
        press_fn=lambda runtime: runtime.async_reset(),
    ),
]


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    runtime: ZmanClockRuntime = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(ClockButton(runtime, desc) for desc in DESCRIPTIONS)


class ClockButton(ZmanClockControlDevice, ButtonEntity):
    """Playback control button."""

    entity_description: ClockButtonDescription

    def __init__(self, runtime: ZmanClockRuntime, description: ClockButtonDescription) -> None:
        super().__init__(runtime)
        self.entity_description = description
        self._attr_unique_id = f"zmanclock_{description.key}"
        self.entity_id = f"button.zmanclock_{description.key}"

    async def async_press(self) -> None:
        self.entity_description.press_fn(self._runtime)
