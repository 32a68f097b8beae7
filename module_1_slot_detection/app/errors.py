"""Error types raised around the detection service boundary."""
from __future__ import annotations

from typing import Optional


class ParkingError(Exception):
    """Base class for recoverable parking flow errors."""


class ConfigurationError(ParkingError):
    """A precondition such as the API key is missing."""


class DetectionFailure(ParkingError):
    """The detection service rejected the request or found nothing."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
