from module_1_slot_detection.app.errors import ConfigurationError, DetectionFailure, ParkingError

__all__ = [
    "AllocationFailure",
    "ConfigurationError",
    "DetectionFailure",
    "ParkingError",
    "SessionStepError",
]


class AllocationFailure(ParkingError):
    """No empty slot is available for the vehicle."""


class SessionStepError(ParkingError):
    """A session step was requested before its inputs exist."""
