"""Exceptions raised by the tracking engine."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for run tracker errors."""


class LocationPermissionError(TrackerError):
    """Location permission was not granted; the start/resume attempt is aborted."""

    def __init__(self, message: str = "Location permission is required to track your run.") -> None:
        super().__init__(message)


class LocationServiceError(TrackerError):
    """The platform location service failed (e.g. single-shot fix unavailable)."""


class InvalidTransitionError(TrackerError):
    """An action was requested in a session state that does not allow it."""

    def __init__(self, action: str, status: str) -> None:
        super().__init__(f"cannot {action} while session is {status}")
        self.action = action
        self.status = status
