"""
Error types for the LPG monitor
"""
from typing import List, Optional


class MonitorError(Exception):
    """Base class for all monitor errors"""


class ValidationError(MonitorError, ValueError):
    """Rejected device registration or configuration edit.

    ``errors`` holds every problem found, this one included.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.errors: List["ValidationError"] = [self]

    @classmethod
    def combine(cls, errors: List["ValidationError"]) -> "ValidationError":
        first = errors[0]
        first.errors = list(errors)
        return first


class NotFoundError(MonitorError, KeyError):
    """Lookup of an unknown device"""

    def __init__(self, device_id: str):
        super().__init__(device_id)
        self.device_id = device_id

    def __str__(self) -> str:
        return f"Unknown device: {self.device_id}"


class DispatchError(MonitorError):
    """A notification channel failed to deliver"""

    def __init__(self, channel: str, reason: str, device_id: Optional[str] = None):
        super().__init__(f"{channel} dispatch failed: {reason}")
        self.channel = channel
        self.reason = reason
        self.device_id = device_id
