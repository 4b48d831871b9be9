# custom_components/zmanclock/select.py
from __future__ import annotations

import logging
from typing import Final

from homeassistant.components.select import SelectEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .zmanclock_lib.const import SPEED_LEVELS
from .const import DOMAIN
from .device import ZmanClockControlDevice
from .runtime import ZmanClockRuntime

_LOGGER = logging.getLogger(__name__)

SPEED_OPTIONS: Final[list[str]] = [str(level) for level in SPEED_LEVELS]


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    runtime: ZmanClockRuntime = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([PlaybackSpeedSelect(runtime)])


class PlaybackSpeedSelect(ZmanClockControlDevice, SelectEntity):
    """Playback multiplier: negative rewinds, 0 holds the offset."""

    _attr_name = "Playback Speed"
    _attr_icon = "mdi:play-speed"
    _attr_unique_id = "zmanclock_playback_speed"
    _attr_options = SPEED_OPTIONS

    def __init__(self, runtime: ZmanClockRuntime) -> None:
        super().__init__(runtime)
        self.entity_id = "select.zmanclock_playback_speed"

    @property
    def current_option(self) -> str | None:
        return str(self._runtime.clock.speed)

    async def async_select_option(self, option: str) -> None:
        if option not in SPEED_OPTIONS:
            _LOGGER.warning("Invalid playback speed: %s", option)
            return
        self._runtime.async_set_speed(int(option))
