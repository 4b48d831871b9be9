"""Shared clock runtime: the fine timer, the render tick and the current frame."""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, timedelta

from homeassistant.components import persistent_notification
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.event import async_track_time_interval

from .zmanclock_lib.exceptions import PolarRegionError
from .zmanclock_lib.hebrew_calendar import HebrewDate, step_month
from .zmanclock_lib.pipeline import ClockFrame, ClockPipeline
from .zmanclock_lib.virtual_clock import AsyncioIntervalScheduler, VirtualClock
from .const import NOTIFICATION_ID, SIGNAL_FRAME

_LOGGER = logging.getLogger(__name__)


class ZmanClockRuntime:
    """Owns the VirtualClock and ClockPipeline for one config entry.

    The fine timer only moves the playback offset; the slower render tick
    runs the pipeline and pushes the frame to entities over the dispatcher.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        pipeline: ClockPipeline,
        *,
        render_interval: timedelta,
        fine_tick_ms: int,
    ) -> None:
        self.hass = hass
        self.pipeline = pipeline
        self.signal = SIGNAL_FRAME.format(entry_id)
        self.clock = VirtualClock(
            scheduler=AsyncioIntervalScheduler(hass.loop),
            tick_period_ms=fine_tick_ms,
        )
        self.frame: ClockFrame | None = None
        self._render_interval = render_interval
        self._unsub_render: Callable[[], None] | None = None

    @property
    def supported(self) -> bool:
        return self.pipeline.supported

    @callback
    def async_start(self) -> None:
        if self._unsub_render is None:
            self._unsub_render = async_track_time_interval(
                self.hass, self._render_tick, self._render_interval
            )
        self.async_refresh()

    @callback
    def async_stop(self) -> None:
        if self._unsub_render is not None:
            self._unsub_render()
            self._unsub_render = None
        self.clock.reset()

    @callback
    def _render_tick(self, _now=None) -> None:
        self.async_refresh()

    @callback
    def async_refresh(self) -> None:
        """Run one render tick now."""
        if not self.pipeline.supported:
            return
        instant = self.clock.tick()
        try:
            frame = self.pipeline.update(instant)
        except PolarRegionError as err:
            self._halt(err)
            return
        if frame is None:
            return
        self.frame = frame
        async_dispatcher_send(self.hass, self.signal)

    def _halt(self, err: PolarRegionError) -> None:
        _LOGGER.warning("ZmanClock stopped: %s", err)
        if self._unsub_render is not None:
            self._unsub_render()
            self._unsub_render = None
        self.clock.reset()
        self.frame = None
        persistent_notification.async_create(
            self.hass,
            (
                f"Zmanim cannot be calculated at latitude {err.latitude:.2f}, "
                f"longitude {err.longitude:.2f} ({err.missing} does not occur). "
                "Pick another location in the ZmanClock options."
            ),
            title="ZmanClock: location not supported",
            notification_id=NOTIFICATION_ID,
        )
        async_dispatcher_send(self.hass, self.signal)

    # --- playback controls -------------------------------------------------

    @callback
    def async_set_speed(self, multiplier: int) -> None:
        self.clock.set_speed(multiplier)
        self.async_refresh()

    @callback
    def async_step_speed(self, direction: int) -> None:
        self.clock.step_speed(direction)
        self.async_refresh()

    @callback
    def async_shift_days(self, delta: int) -> None:
        self.clock.set_days_ahead(delta)
        self.async_refresh()

    @callback
    def async_reset(self) -> None:
        self.clock.reset()
        self.async_refresh()

    @callback
    def async_jump_to_date(self, target: date) -> None:
        self.clock.jump_to_date(target, self.pipeline.timezone)
        self.async_refresh()

    @callback
    def async_jump_to_hebrew_date(self, year: int, month: int, day: int) -> None:
        """Raises InvalidHebrewDateInput for impossible dates."""
        self.async_jump_to_date(HebrewDate.validated(year, month, day).to_civil())

    @callback
    def async_step_month(self, months: int) -> None:
        """Move the displayed Hebrew date by whole months."""
        if self.frame is None:
            return
        target = step_month(self.frame.hebrew_date, months)
        shown = self.frame.hebrew_date.to_civil()
        self.clock.set_days_ahead((target.to_civil() - shown).days)
        self.async_refresh()
