"""Displayed time: real time shifted by whole days and a playback offset."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Protocol

from .const import DAY_MS, DEFAULT_FINE_TICK_MS, SMOOTH_ANIMATION_LIMIT, SPEED_LEVELS
from .location import TimeZoneContext

_LOGGER = logging.getLogger(__name__)

Cancel = Callable[[], None]


class IntervalScheduler(Protocol):
    def schedule_interval(self, callback: Callable[[], None], period: float) -> Cancel:
        """Call ``callback`` every ``period`` seconds until cancelled."""
        ...


class _IntervalTask:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: Callable[[], None],
        period: float,
    ) -> None:
        self._loop = loop
        self._callback = callback
        self._period = period
        self._deadline = loop.time() + period
        self._handle = loop.call_at(self._deadline, self._fire)

    def _fire(self) -> None:
        # fixed deadlines; a late wakeup runs every period it missed
        now = self._loop.time()
        while self._deadline <= now:
            self._callback()
            self._deadline += self._period
        self._handle = self._loop.call_at(self._deadline, self._fire)

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioIntervalScheduler:
    """IntervalScheduler on an asyncio loop that never drops a period."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule_interval(self, callback: Callable[[], None], period: float) -> Cancel:
        loop = self._loop or asyncio.get_running_loop()
        return _IntervalTask(loop, callback, period).cancel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class VirtualClockState:
    days_ahead_offset: int = 0
    time_offset_ms: int = 0
    speed_multiplier: int = 0
    tick_handle: Cancel | None = None


class VirtualClock:
    """Maps real time to the displayed instant.

    ``advance`` is the fine timer step (offset only). ``tick`` is what the
    render loop calls to read the displayed instant.
    """

    def __init__(
        self,
        now_fn: Callable[[], datetime] = _utcnow,
        scheduler: IntervalScheduler | None = None,
        tick_period_ms: int = DEFAULT_FINE_TICK_MS,
    ) -> None:
        if tick_period_ms <= 0:
            raise ValueError("tick_period_ms must be positive")
        self._now_fn = now_fn
        self._scheduler = scheduler or AsyncioIntervalScheduler()
        self.tick_period_ms = tick_period_ms
        self.state = VirtualClockState()

    @property
    def speed(self) -> int:
        return self.state.speed_multiplier

    @property
    def days_ahead(self) -> int:
        return self.state.days_ahead_offset

    @property
    def smooth_animation(self) -> bool:
        """False once playback is fast enough that easing would lag the hand."""
        return abs(self.state.speed_multiplier) < SMOOTH_ANIMATION_LIMIT

    def displayed_instant(self) -> datetime:
        offset_ms = self.state.time_offset_ms + self.state.days_ahead_offset * DAY_MS
        return self._now_fn() + timedelta(milliseconds=offset_ms)

    def tick(self) -> datetime:
        return self.displayed_instant()

    def advance(self) -> None:
        self.state.time_offset_ms += self.tick_period_ms * self.state.speed_multiplier

    def set_days_ahead(self, delta: int) -> None:
        self.state.days_ahead_offset += int(delta)

    def set_speed(self, multiplier: int) -> None:
        if multiplier not in SPEED_LEVELS:
            raise ValueError(f"Speed must be one of {SPEED_LEVELS}, got {multiplier}")
        self.state.speed_multiplier = multiplier
        if multiplier == 0:
            self._stop_timer()
        elif self.state.tick_handle is None:
            self.state.tick_handle = self._scheduler.schedule_interval(
                self.advance, self.tick_period_ms / 1000
            )
        _LOGGER.debug("Playback speed set to %sx", multiplier)

    def step_speed(self, direction: int) -> int:
        """Move one speed level up (direction > 0) or down; clamps at the ends."""
        index = SPEED_LEVELS.index(self.state.speed_multiplier)
        if direction > 0:
            index = min(index + 1, len(SPEED_LEVELS) - 1)
        elif direction < 0:
            index = max(index - 1, 0)
        self.set_speed(SPEED_LEVELS[index])
        return self.state.speed_multiplier

    def reset(self) -> None:
        self._stop_timer()
        self.state.speed_multiplier = 0
        self.state.time_offset_ms = 0
        self.state.days_ahead_offset = 0

    def jump_to_date(self, target: date, timezone_ctx: TimeZoneContext) -> None:
        """Show ``target`` at the current wall-clock time; playback stops."""
        today = timezone_ctx.civil_date(self._now_fn())
        self._stop_timer()
        self.state.speed_multiplier = 0
        self.state.time_offset_ms = 0
        self.state.days_ahead_offset = (target - today).days

    def _stop_timer(self) -> None:
        if self.state.tick_handle is not None:
            self.state.tick_handle()
            self.state.tick_handle = None
