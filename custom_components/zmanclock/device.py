# custom_components/zmanclock/device.py
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity import Entity

from .zmanclock_lib.pipeline import ClockFrame
from .config_flow import CONF_TIME_FORMAT, DEFAULT_TIME_FORMAT
from .const import CONFIG_KEY, DOMAIN
from .runtime import ZmanClockRuntime


class ZmanClockDevice(Entity):
    """Base mixin for ALL ZmanClock entities: shared DeviceInfo, frame
    subscription, listener management and time formatting.
    """

    _attr_should_poll = False
    _attr_device_info = DeviceInfo(
        identifiers={(DOMAIN, "zmanclock_main")},
        name="ZmanClock",
        manufacturer="ZmanClock",
        model="Seasonal-hour clock",
        entry_type="service",
    )

    def __init__(self, runtime: ZmanClockRuntime) -> None:
        super().__init__()
        self._runtime = runtime
        self._listener_unsubs: list[Callable[[], None]] = []

    @property
    def frame(self) -> ClockFrame | None:
        return self._runtime.frame

    @property
    def available(self) -> bool:
        return self._runtime.supported and self._runtime.frame is not None

    async def async_added_to_hass(self) -> None:
        await super().async_added_to_hass()
        self._register_listener(
            async_dispatcher_connect(self.hass, self._runtime.signal, self._handle_frame)
        )

    @callback
    def _handle_frame(self) -> None:
        self.async_write_ha_state()

    # --- Time format helpers ---
    def _get_time_format(self) -> str:
        """Return configured time format ('12' or '24')."""
        cfg = self.hass.data.get(DOMAIN, {}).get(CONFIG_KEY, {})
        fmt = cfg.get(CONF_TIME_FORMAT, DEFAULT_TIME_FORMAT)
        return fmt if fmt in ("12", "24") else DEFAULT_TIME_FORMAT

    def _format_simple_time(self, dt_local: datetime, fmt: str | None = None) -> str:
        """Format a local datetime honoring the 12/24 option."""
        fmt = fmt or self._get_time_format()

        if fmt == "24":
            return dt_local.strftime("%H:%M")

        hour = dt_local.hour % 12 or 12
        ampm = "AM" if dt_local.hour < 12 else "PM"
        return f"{hour}:{dt_local.minute:02d} {ampm}"

    def _local(self, dt: datetime) -> datetime:
        return dt.astimezone(self._runtime.pipeline.timezone.tzinfo)

    # --- Listener helpers ---
    def _register_listener(self, unsub: Callable[[], None]) -> None:
        self._listener_unsubs.append(unsub)

    async def async_will_remove_from_hass(self) -> None:
        """On entity removal, clean up any registered listeners."""
        for unsub in self._listener_unsubs:
            unsub()
        self._listener_unsubs.clear()
        await super().async_will_remove_from_hass()


class ZmanClockZmanDevice(ZmanClockDevice):
    """Zmanim timestamps show under a separate device."""

    _attr_device_info = DeviceInfo(
        identifiers={(DOMAIN, "zmanclock_zmanim")},
        name="ZmanClock — Zmanim",
        manufacturer="ZmanClock",
        model="Zmanim Times",
        entry_type="service",
    )


class ZmanClockControlDevice(ZmanClockDevice):
    """Playback controls: speed select and stepping buttons."""

    _attr_device_info = DeviceInfo(
        identifiers={(DOMAIN, "zmanclock_controls")},
        name="ZmanClock — Playback",
        manufacturer="ZmanClock",
        model="Time Travel Controls",
        entry_type="service",
    )

    @property
    def available(self) -> bool:
        return self._runtime.supported
