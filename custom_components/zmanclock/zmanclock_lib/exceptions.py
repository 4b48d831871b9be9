"""Errors raised by the zmanclock core."""
from __future__ import annotations


class ZmanClockError(Exception):
    """Base class for zmanclock errors."""


class PolarRegionError(ZmanClockError):
    """The sun never reaches a required altitude on this date at this location.

    Not retryable: the caller should stop recomputing until the location changes.
    """

    def __init__(self, latitude: float, longitude: float, missing: str) -> None:
        super().__init__(
            f"No {missing} at ({latitude:.4f}, {longitude:.4f}); location not supported"
        )
        self.latitude = latitude
        self.longitude = longitude
        self.missing = missing


class OracleUnavailableError(ZmanClockError):
    """The astronomical backend failed; the next tick may retry."""


class InvalidHebrewDateInput(ZmanClockError, ValueError):
    """A (year, month, day) triple that does not exist in the Hebrew calendar."""
