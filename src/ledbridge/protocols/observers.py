"""Observer protocol definitions for device connection events.

- Connection observers: React to connection state transitions and to
  lines printed by the device
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ledbridge.models import ConnectionState
    from ledbridge.protocol import StatusLine


@runtime_checkable
class ConnectionObserver(Protocol):
    """
    Observer that receives events from the SerialConnectionManager.

    This protocol allows loose coupling between the connection manager
    and components that report device health (gateway logs, CLI, tests).
    """

    def on_connection_state_changed(
        self, previous: "ConnectionState", current: "ConnectionState"
    ) -> None:
        """
        Handle a connection state transition.

        Args:
            previous: State before the transition
            current: State after the transition

        Threading:
            Called from whichever thread caused the transition: a request
            handler (connect, send, reconnect) or the serial reader thread
            (read failure). Internal locks are already released, so the
            observer may query the manager.

        Error Handling:
            Exceptions raised by observers are caught and logged by the
            manager. They never affect the connection.
        """
        ...

    def on_status_line(self, line: "StatusLine") -> None:
        """
        Handle a line printed by the device.

        Args:
            line: The decoded line

        Note:
            Called from the serial reader thread. Lines are not correlated
            with any command; implementations should avoid blocking.
        """
        ...
