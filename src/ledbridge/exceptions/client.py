"""Gateway client exceptions."""

from typing import Optional

from .base import LedBridgeError


class GatewayRequestError(LedBridgeError):
    """Gateway rejected a request or could not be reached."""

    def __init__(self, endpoint: str, message: str, status_code: Optional[int] = None):
        """
        Initialize gateway request error.

        Args:
            endpoint: Path that was requested
            message: The gateway's `error` text, or the network failure
            status_code: HTTP status, or None if no response was received
        """
        if status_code is None:
            tech_msg = f"Request to {endpoint} failed: {message}"
            recovery = "Check that 'ledbridge serve' is running and reachable."
        else:
            tech_msg = f"Request to {endpoint} returned {status_code}: {message}"
            recovery = None

        super().__init__(
            user_message=message,
            technical_message=tech_msg,
            recovery_hint=recovery,
        )
        self.endpoint = endpoint
        self.status_code = status_code
