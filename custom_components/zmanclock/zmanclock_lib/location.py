"""Observer location and the timezone used for civil-day boundaries."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz

from .const import ISRAEL_BOUNDS


def normalize_longitude(longitude: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    return ((longitude + 180.0) % 360.0) - 180.0


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    elevation: float = 0.0

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        object.__setattr__(self, "longitude", normalize_longitude(self.longitude))


@dataclass(frozen=True)
class TimeZoneContext:
    """IANA zone for "which calendar day is it"; None means the host's zone."""

    iana_name: str | None = None
    _tzinfo: tzinfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.iana_name:
            try:
                zone: tzinfo = ZoneInfo(self.iana_name)
            except (ZoneInfoNotFoundError, ValueError) as err:
                raise ValueError(f"Unknown time zone: {self.iana_name}") from err
        else:
            zone = tz.tzlocal()
        object.__setattr__(self, "_tzinfo", zone)

    @property
    def tzinfo(self) -> tzinfo:
        return self._tzinfo

    def localize(self, instant: datetime) -> datetime:
        return instant.astimezone(self._tzinfo)

    def civil_date(self, instant: datetime) -> date:
        """Calendar date of ``instant`` as seen in this zone."""
        return self.localize(instant).date()


def in_israel(latitude: float, longitude: float) -> bool:
    """Bounding-box geofence selecting the Israel holiday rules."""
    lat_min, lat_max, lon_min, lon_max = ISRAEL_BOUNDS
    lon = normalize_longitude(longitude)
    return lat_min <= latitude <= lat_max and lon_min <= lon <= lon_max
