"""Root of the ledbridge error hierarchy.

Every error carries two texts. `user_message` is what an HTTP client or CLI
user sees; for device-facing errors it is the Portuguese text the web UI
displays. `technical_message` goes to the log. `http_status` is the status
the gateway answers with when the error escapes a request handler.
"""

from typing import Optional


class LedBridgeError(Exception):
    """
    Base exception for all ledbridge errors.

    Attributes:
        user_message: Text returned to clients / printed by the CLI
        technical_message: Log text (defaults to user_message)
        http_status: Gateway response status for this error
        recovery_hint: What the user can do about it, if anything
    """

    http_status: int = 500

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recovery_hint: Optional[str] = None,
        http_status: Optional[int] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recovery_hint = recovery_hint
        if http_status is not None:
            self.http_status = http_status

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, for terminal output."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
