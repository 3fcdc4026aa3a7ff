"""Serial transport exceptions.

This module defines exceptions for the device connection:
- TransportUnavailableError: The serial device could not be opened
- NotConnectedError: A command was sent while the connection is not open
- TransportError: The link failed in the middle of a session
"""

from typing import Optional

from .base import LedBridgeError


class TransportUnavailableError(LedBridgeError):
    """Serial device could not be opened (missing, busy, or no permission)."""

    def __init__(
        self,
        port: str,
        reason: str = "unavailable",
        original_error: Optional[str] = None,
    ):
        """
        Initialize transport-unavailable error.

        Args:
            port: The serial device path that failed to open
            reason: One of "not_found", "permission", "busy" or "unavailable"
            original_error: The original error message from the serial library
        """
        if reason == "not_found":
            user_msg = f"Serial device {port} not found."
            recovery = "Check the cable and run 'ledbridge ports' to see available devices."
        elif reason == "permission":
            user_msg = f"Permission denied opening serial device {port}."
            recovery = (
                "Add your user to the group that owns the device "
                "(usually 'dialout' or 'uucp') and log in again."
            )
        elif reason == "busy":
            user_msg = f"Serial device {port} is already in use."
            recovery = "Close the Arduino IDE serial monitor or any other program using the port."
        else:
            user_msg = f"Could not open serial device {port}."
            recovery = "Run 'ledbridge ports' to see available devices."

        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recovery_hint=recovery,
        )
        self.port = port
        self.reason = reason


class NotConnectedError(LedBridgeError):
    """Command sent while the device connection is not open."""

    def __init__(self, state: Optional[str] = None):
        """
        Initialize not-connected error.

        Args:
            state: Connection state at the time of the send attempt
        """
        tech_msg = "Send rejected: connection is not open"
        if state:
            tech_msg += f" (state={state})"

        super().__init__(
            user_message="Arduino não conectado",
            technical_message=tech_msg,
            recovery_hint="Use POST /api/reconnect (or 'ledbridge serve' restart) to reopen the port.",
        )
        self.state = state


class TransportError(LedBridgeError):
    """Serial link failed during an open session."""

    def __init__(self, port: str, original_error: str):
        """
        Initialize transport error.

        Args:
            port: The serial device path
            original_error: The original I/O error message
        """
        super().__init__(
            user_message=f"Erro na porta serial: {original_error}",
            technical_message=f"I/O failure on {port}: {original_error}",
            recovery_hint="The connection is now faulted. Reconnect to resume sending commands.",
        )
        self.port = port
        self.original_error = original_error
