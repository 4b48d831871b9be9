from __future__ import annotations

import logging
from datetime import date, timedelta

import voluptuous as vol
from homeassistant.components import persistent_notification
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
import homeassistant.helpers.config_validation as cv
from timezonefinder import TimezoneFinder

from .zmanclock_lib.exceptions import InvalidHebrewDateInput
from .zmanclock_lib.location import Location, TimeZoneContext
from .zmanclock_lib.pipeline import ClockPipeline
from .config_flow import (
    CONF_CANDLELIGHTING_OFFSET,
    CONF_ELEVATION,
    CONF_FINE_TICK_MS,
    CONF_IS_IN_ISRAEL,
    CONF_LATITUDE,
    CONF_LONGITUDE,
    CONF_RENDER_INTERVAL,
    CONF_TIME_FORMAT,
    CONF_TIME_ZONE,
    DEFAULT_CANDLELIGHTING_OFFSET,
    DEFAULT_ELEVATION,
    DEFAULT_FINE_TICK,
    DEFAULT_RENDER_INTERVAL_SECONDS,
    DEFAULT_TIME_FORMAT,
)
from .const import (
    ATTR_DATE,
    ATTR_HEBREW_DAY,
    ATTR_HEBREW_MONTH,
    ATTR_HEBREW_YEAR,
    ATTR_MONTHS,
    CONFIG_KEY,
    DOMAIN,
    NOTIFICATION_ID,
    SERVICE_JUMP_TO_DATE,
    SERVICE_STEP_MONTH,
)
from .runtime import ZmanClockRuntime

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.SENSOR, Platform.SELECT, Platform.BUTTON]

JUMP_TO_DATE_SCHEMA = vol.Schema(
    vol.Any(
        {vol.Required(ATTR_DATE): cv.date},
        {
            vol.Required(ATTR_HEBREW_YEAR): vol.Coerce(int),
            vol.Required(ATTR_HEBREW_MONTH): vol.All(vol.Coerce(int), vol.Range(min=1, max=13)),
            vol.Required(ATTR_HEBREW_DAY): vol.All(vol.Coerce(int), vol.Range(min=1, max=30)),
        },
    )
)

STEP_MONTH_SCHEMA = vol.Schema({vol.Required(ATTR_MONTHS): vol.Coerce(int)})


async def resolve_time_zone(hass: HomeAssistant, latitude: float, longitude: float) -> str:
    """Look up the IANA zone for the coordinates, falling back to HA's zone."""

    def get_tzname(lat, lon):
        return TimezoneFinder().timezone_at(lng=lon, lat=lat)

    try:
        tzname = await hass.async_add_executor_job(get_tzname, latitude, longitude)
    except (OSError, ValueError) as err:
        _LOGGER.warning("Timezone lookup failed (%s), falling back to HA time_zone", err)
        tzname = None

    return tzname or hass.config.time_zone


def _runtime(hass: HomeAssistant) -> ZmanClockRuntime:
    for value in hass.data.get(DOMAIN, {}).values():
        if isinstance(value, ZmanClockRuntime):
            return value
    raise HomeAssistantError("ZmanClock is not set up")


# ───────────────────────────────────────────────────────────────────────────────
# Home Assistant integration lifecycle
# ───────────────────────────────────────────────────────────────────────────────

async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up ZmanClock from a config entry."""
    entry.async_on_unload(entry.add_update_listener(_async_update_options))

    initial = entry.data or {}
    opts = entry.options or {}

    def get(key, default):
        return opts.get(key, initial.get(key, default))

    latitude = float(get(CONF_LATITUDE, hass.config.latitude))
    longitude = float(get(CONF_LONGITUDE, hass.config.longitude))
    elevation = float(get(CONF_ELEVATION, DEFAULT_ELEVATION))
    is_in_israel = bool(get(CONF_IS_IN_ISRAEL, False))
    candle = int(get(CONF_CANDLELIGHTING_OFFSET, DEFAULT_CANDLELIGHTING_OFFSET))
    time_format = get(CONF_TIME_FORMAT, DEFAULT_TIME_FORMAT)
    render_interval = float(get(CONF_RENDER_INTERVAL, DEFAULT_RENDER_INTERVAL_SECONDS))
    fine_tick_ms = int(get(CONF_FINE_TICK_MS, DEFAULT_FINE_TICK))

    tzname = (get(CONF_TIME_ZONE, "") or "").strip()
    if not tzname:
        tzname = await resolve_time_zone(hass, latitude, longitude)

    try:
        location = Location(latitude, longitude, elevation)
        zone = TimeZoneContext(tzname)
    except ValueError as err:
        _LOGGER.error("Invalid ZmanClock location settings: %s", err)
        return False

    pipeline = ClockPipeline(
        location, zone, in_israel=is_in_israel, candle_offset=candle
    )
    runtime = ZmanClockRuntime(
        hass,
        entry.entry_id,
        pipeline,
        render_interval=timedelta(seconds=render_interval),
        fine_tick_ms=fine_tick_ms,
    )

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = runtime
    hass.data[DOMAIN][CONFIG_KEY] = {
        "latitude": location.latitude,
        "longitude": location.longitude,
        "elevation": location.elevation,
        "tzname": tzname,
        CONF_IS_IN_ISRAEL: is_in_israel,
        CONF_CANDLELIGHTING_OFFSET: candle,
        CONF_TIME_FORMAT: time_format,
    }

    # a previous polar warning no longer applies to the new settings
    persistent_notification.async_dismiss(hass, NOTIFICATION_ID)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _async_register_services(hass)
    runtime.async_start()
    return True


async def _async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload when options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    runtime: ZmanClockRuntime | None = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    if runtime is not None:
        runtime.async_stop()

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)
        hass.data[DOMAIN].pop(CONFIG_KEY, None)
        hass.services.async_remove(DOMAIN, SERVICE_JUMP_TO_DATE)
        hass.services.async_remove(DOMAIN, SERVICE_STEP_MONTH)
    return unload_ok


# ───────────────────────────────────────────────────────────────────────────────
# Services
# ───────────────────────────────────────────────────────────────────────────────

def _async_register_services(hass: HomeAssistant) -> None:
    if hass.services.has_service(DOMAIN, SERVICE_JUMP_TO_DATE):
        return

    async def handle_jump_to_date(call: ServiceCall) -> None:
        runtime = _runtime(hass)
        target: date | None = call.data.get(ATTR_DATE)
        if target is not None:
            runtime.async_jump_to_date(target)
            return
        try:
            runtime.async_jump_to_hebrew_date(
                call.data[ATTR_HEBREW_YEAR],
                call.data[ATTR_HEBREW_MONTH],
                call.data[ATTR_HEBREW_DAY],
            )
        except InvalidHebrewDateInput as err:
            raise HomeAssistantError(str(err)) from err

    async def handle_step_month(call: ServiceCall) -> None:
        runtime = _runtime(hass)
        if not runtime.supported:
            raise HomeAssistantError("The configured location is not supported")
        runtime.async_step_month(call.data[ATTR_MONTHS])

    hass.services.async_register(
        DOMAIN, SERVICE_JUMP_TO_DATE, handle_jump_to_date, schema=JUMP_TO_DATE_SCHEMA
    )
    hass.services.async_register(
        DOMAIN, SERVICE_STEP_MONTH, handle_step_month, schema=STEP_MONTH_SCHEMA
    )
