import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers.selector import selector

from .zmanclock_lib.const import (
    DEFAULT_CANDLE_LIGHTING_OFFSET,
    DEFAULT_FINE_TICK_MS,
    DEFAULT_RENDER_INTERVAL,
)
from .zmanclock_lib.location import in_israel
from .const import DOMAIN, NAME

# ============ Location ============
CONF_LATITUDE = "latitude"
CONF_LONGITUDE = "longitude"
CONF_ELEVATION = "elevation"
CONF_TIME_ZONE = "time_zone"  # blank -> looked up from the coordinates
DEFAULT_ELEVATION = 0

# ============ General ============
CONF_IS_IN_ISRAEL = "is_in_israel"
CONF_CANDLELIGHTING_OFFSET = "candlelighting_offset"
DEFAULT_CANDLELIGHTING_OFFSET = DEFAULT_CANDLE_LIGHTING_OFFSET
CONF_TIME_FORMAT = "time_format"
DEFAULT_TIME_FORMAT = "12"

# ============ Timing ============
CONF_RENDER_INTERVAL = "render_interval"  # seconds
DEFAULT_RENDER_INTERVAL_SECONDS = DEFAULT_RENDER_INTERVAL
CONF_FINE_TICK_MS = "fine_tick_ms"
DEFAULT_FINE_TICK = DEFAULT_FINE_TICK_MS

TIME_FORMAT_SELECTOR = selector({
    "select": {
        "options": [
            {"value": "12", "label": "12-hour (AM/PM)"},
            {"value": "24", "label": "24-hour"},
        ]
    }
})


def _location_schema(defaults: dict) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_LATITUDE, default=defaults[CONF_LATITUDE]): vol.All(
                vol.Coerce(float), vol.Range(min=-90, max=90)
            ),
            vol.Required(CONF_LONGITUDE, default=defaults[CONF_LONGITUDE]): vol.Coerce(float),
            vol.Optional(CONF_ELEVATION, default=defaults[CONF_ELEVATION]): vol.Coerce(float),
            vol.Optional(CONF_TIME_ZONE, default=defaults[CONF_TIME_ZONE]): str,
        }
    )


def _general_schema(get) -> vol.Schema:
    return vol.Schema(
        {
            vol.Optional(CONF_IS_IN_ISRAEL, default=get(CONF_IS_IN_ISRAEL, False)): bool,
            vol.Optional(
                CONF_CANDLELIGHTING_OFFSET,
                default=get(CONF_CANDLELIGHTING_OFFSET, DEFAULT_CANDLELIGHTING_OFFSET),
            ): int,
            vol.Optional(
                CONF_TIME_FORMAT,
                default=get(CONF_TIME_FORMAT, DEFAULT_TIME_FORMAT),
            ): TIME_FORMAT_SELECTOR,
        }
    )


class ZmanClockConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for ZmanClock."""
    VERSION = 1

    def __init__(self) -> None:
        self._location: dict = {}

    async def async_step_user(self, user_input=None):
        """Step 1: where the clock is."""
        # Only one instance
        if self._async_current_entries():
            return self.async_abort(reason="single_instance_allowed")

        if user_input is None:
            defaults = {
                CONF_LATITUDE: self.hass.config.latitude,
                CONF_LONGITUDE: self.hass.config.longitude,
                CONF_ELEVATION: self.hass.config.elevation or DEFAULT_ELEVATION,
                CONF_TIME_ZONE: "",
            }
            return self.async_show_form(step_id="user", data_schema=_location_schema(defaults))

        self._location = user_input
        return await self.async_step_general()

    async def async_step_general(self, user_input=None):
        """Step 2: region and display settings."""
        if user_input is None:
            # the Israel box only picks the default; the user has the last word
            guess = in_israel(self._location[CONF_LATITUDE], self._location[CONF_LONGITUDE])

            def get(key, default):
                return guess if key == CONF_IS_IN_ISRAEL else default

            return self.async_show_form(step_id="general", data_schema=_general_schema(get))

        data = {**self._location, **user_input}
        return self.async_create_entry(title=NAME, data=data)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Options flow with a menu: location, general and timing."""

    def __init__(self, config_entry):
        self._config_entry = config_entry

    def _get(self, key, default):
        data = self._config_entry.data or {}
        opts = self._config_entry.options or {}
        return opts.get(key, data.get(key, default))

    async def async_step_init(self, user_input=None):
        return self.async_show_menu(
            step_id="init",
            menu_options=["location", "general", "timing"],
        )

    async def async_step_location(self, user_input=None):
        if user_input is None:
            defaults = {
                CONF_LATITUDE: self._get(CONF_LATITUDE, self.hass.config.latitude),
                CONF_LONGITUDE: self._get(CONF_LONGITUDE, self.hass.config.longitude),
                CONF_ELEVATION: self._get(CONF_ELEVATION, DEFAULT_ELEVATION),
                CONF_TIME_ZONE: self._get(CONF_TIME_ZONE, ""),
            }
            return self.async_show_form(step_id="location", data_schema=_location_schema(defaults))

        new_opts = {**self._config_entry.options, **user_input}
        return self.async_create_entry(title="", data=new_opts)

    async def async_step_general(self, user_input=None):
        if user_input is None:
            return self.async_show_form(step_id="general", data_schema=_general_schema(self._get))

        new_opts = {**self._config_entry.options, **user_input}
        return self.async_create_entry(title="", data=new_opts)

    async def async_step_timing(self, user_input=None):
        """How often the clock redraws and how finely playback advances."""
        if user_input is None:
            schema = vol.Schema(
                {
                    vol.Optional(
                        CONF_RENDER_INTERVAL,
                        default=self._get(CONF_RENDER_INTERVAL, DEFAULT_RENDER_INTERVAL_SECONDS),
                    ): selector({
                        "number": {
                            "min": 0.1,
                            "max": 60,
                            "step": 0.1,
                            "mode": "box",
                            "unit_of_measurement": "s",
                        }
                    }),
                    vol.Optional(
                        CONF_FINE_TICK_MS,
                        default=self._get(CONF_FINE_TICK_MS, DEFAULT_FINE_TICK),
                    ): selector({
                        "number": {
                            "min": 5,
                            "max": 1000,
                            "step": 5,
                            "mode": "box",
                            "unit_of_measurement": "ms",
                        }
                    }),
                }
            )
            return self.async_show_form(step_id="timing", data_schema=schema)

        new_opts = {**self._config_entry.options, **user_input}
        return self.async_create_entry(title="", data=new_opts)
