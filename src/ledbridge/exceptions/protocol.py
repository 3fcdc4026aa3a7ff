"""Command protocol exceptions.

- InvalidParameterError: A command parameter failed validation
- DecodeError: A line received from the device could not be decoded
"""

from typing import Any

from .base import LedBridgeError


class InvalidParameterError(LedBridgeError):
    """Command parameter is out of range or has the wrong type."""

    http_status = 400

    def __init__(self, field: str, value: Any, message: str):
        """
        Initialize invalid-parameter error.

        Args:
            field: Name of the offending parameter
            value: The rejected value
            message: User-facing validation message
        """
        super().__init__(
            user_message=message,
            technical_message=f"Invalid value for {field}: {value!r} ({message})",
        )
        self.field = field
        self.value = value


class DecodeError(LedBridgeError):
    """Line received from the device is malformed."""

    def __init__(self, raw: bytes, reason: str):
        """
        Initialize decode error.

        Args:
            raw: The raw bytes of the line
            reason: Why the line was rejected
        """
        super().__init__(
            user_message=f"Malformed device line: {reason}",
            technical_message=f"Could not decode device line {raw!r}: {reason}",
        )
        self.raw = raw
        self.reason = reason
