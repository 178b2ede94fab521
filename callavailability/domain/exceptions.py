"""
Domain-specific exception hierarchy for the call availability application.
"""


class CallAvailabilityError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeRangeError(CallAvailabilityError, ValueError):
    """Raised when a time range starts after it ends."""


class InvalidLimitationError(CallAvailabilityError, ValueError):
    """Raised when a notice period or daily cap is negative."""


class CallDataError(CallAvailabilityError):
    """Raised when availability or booking data cannot be read or parsed."""


class SelectedTimeUnavailableError(CallAvailabilityError):
    """Raised when a requested booking does not fit the remaining availability."""

    def __init__(self, message: str = "Selected time is no longer available"):
        super().__init__(message)
