"""Serial connection manager for the LED controller.

Owns the one transport handle to the device and the connection state machine:

```
Closed --connect()--> Opening --ok--> Open
                         |              |  read/write failure
                         +--fail--+     v
                                  +-> Faulted
Open | Faulted --disconnect()--> Closed
Faulted --reconnect()--> Closed --(settle delay)--> Opening --> Open
```

Locks, always acquired in this order:

- `_lifecycle_lock`: serializes connect / disconnect / reconnect
- `_write_lock`: serializes writes (and closing the handle) so lines never interleave
- `_state_lock`: guards the state, the transport handle and the reader bookkeeping

Observers are notified only after every lock has been released.
"""

import logging
import threading
import time
from typing import Optional

from ledbridge.exceptions import (
    DecodeError,
    InvalidParameterError,
    NotConnectedError,
    TransportError,
    TransportUnavailableError,
    wrap_serial_error,
)
from ledbridge.model_manager import ObserverManager
from ledbridge.models import AppConfig, Command, ConnectionState
from ledbridge.protocol import LineSplitter, StatusLine, decode_status_line, encode
from ledbridge.protocols import ConnectionObserver

from .transport import Transport, TransportOpener, open_serial_transport

logger = logging.getLogger(__name__)

Transition = tuple[ConnectionState, ConnectionState]


class SerialConnectionManager:
    """
    Single owner of the serial link to the LED controller.

    All request handlers share one manager; `send()` may be called from any
    number of threads. One background reader thread runs per open session and
    decodes whatever the device prints.

    Example:
        ```python
        manager = SerialConnectionManager("/dev/ttyUSB0")
        with manager:
            manager.send_command(build_color_command(255, 0, 0))
        ```
    """

    def __init__(
        self,
        port: str,
        read_timeout: float = 1.0,
        reconnect_delay: float = 1.0,
        opener: Optional[TransportOpener] = None,
    ):
        """
        Initialize the manager in the Closed state. No I/O happens here.

        Args:
            port: Serial device path
            read_timeout: Read timeout of the transport (seconds); bounds how
                long the reader takes to notice a stop request
            reconnect_delay: Settle delay between close and reopen (seconds)
            opener: Factory opening the transport; defaults to pyserial
        """
        self._port = port
        self._read_timeout = read_timeout
        self._reconnect_delay = reconnect_delay
        self._opener: TransportOpener = opener or open_serial_transport

        self._lifecycle_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._state_lock = threading.Lock()

        self._state = ConnectionState.CLOSED
        self._transport: Optional[Transport] = None
        self._reader_thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

        self._last_status: Optional[StatusLine] = None
        self._last_activity: Optional[float] = None

        self._observers = ObserverManager[ConnectionObserver](observer_type_name="connection")

    @classmethod
    def from_config(
        cls, config: AppConfig, opener: Optional[TransportOpener] = None
    ) -> "SerialConnectionManager":
        """Create a manager from the application config."""
        return cls(
            port=config.serial_port,
            read_timeout=config.read_timeout,
            reconnect_delay=config.reconnect_delay,
            opener=opener,
        )

    # =================================================================
    # Properties
    # =================================================================

    @property
    def port(self) -> str:
        """Serial device path this manager connects to."""
        return self._port

    @property
    def state(self) -> ConnectionState:
        """Current connection state (never blocks on I/O)."""
        return self._state

    @property
    def last_status(self) -> Optional[StatusLine]:
        """Most recent line decoded from the device, if any."""
        return self._last_status

    @property
    def last_activity(self) -> Optional[float]:
        """time.monotonic() of the last successful read or write, if any."""
        return self._last_activity

    def is_connected(self) -> bool:
        """True iff the state is Open."""
        return self._state is ConnectionState.OPEN

    # =================================================================
    # Observers
    # =================================================================

    def register_observer(self, observer: ConnectionObserver) -> None:
        """Register an observer for state transitions and device lines."""
        self._observers.register(observer)

    def unregister_observer(self, observer: ConnectionObserver) -> None:
        """Unregister a previously registered observer."""
        self._observers.unregister(observer)

    # =================================================================
    # Lifecycle
    # =================================================================

    def connect(self) -> None:
        """
        Open the transport and start the reader.

        No-op when already Open. From Faulted, the stale handle is released first.

        Raises:
            TransportUnavailableError: If the port cannot be opened; the state
                is left Faulted
        """
        transitions: list[Transition] = []
        try:
            with self._lifecycle_lock:
                self._open_locked(transitions)
        finally:
            self._notify(transitions)

    def disconnect(self) -> None:
        """Close the transport and stop the reader. Always succeeds; idempotent."""
        transitions: list[Transition] = []
        try:
            with self._lifecycle_lock:
                self._release_locked(transitions)
        finally:
            self._notify(transitions)

    def reconnect(self) -> bool:
        """
        Tear down the current handle, wait the settle delay, then reopen once.

        Returns:
            True if the port was reopened, False otherwise (state stays Faulted)
        """
        transitions: list[Transition] = []
        try:
            with self._lifecycle_lock:
                logger.info(f"Reconnecting to {self._port}")
                self._release_locked(transitions)
                time.sleep(self._reconnect_delay)
                try:
                    self._open_locked(transitions)
                except TransportUnavailableError as e:
                    logger.error(f"Reconnect to {self._port} failed: {e.technical_message}")
                    return False
        finally:
            self._notify(transitions)
        return True

    def __enter__(self) -> "SerialConnectionManager":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    # =================================================================
    # Sending
    # =================================================================

    def send(self, line: str) -> None:
        """
        Write one line (plus the newline terminator) to the device.

        Concurrent calls are serialized; each line is written whole and lines
        reach the device in lock acquisition order.

        Raises:
            InvalidParameterError: If the line is not ASCII or contains a newline
            NotConnectedError: If the state is not Open (nothing is written)
            TransportError: If the write fails; the state becomes Faulted
        """
        if "\n" in line or "\r" in line:
            raise InvalidParameterError("line", line, "Command must be a single line")
        try:
            data = (line + "\n").encode("ascii")
        except UnicodeEncodeError as e:
            raise InvalidParameterError("line", line, "Command must be ASCII") from e

        with self._write_lock:
            with self._state_lock:
                state = self._state
                transport = self._transport

            if state is not ConnectionState.OPEN or transport is None:
                raise NotConnectedError(state.value)

            try:
                transport.write(data)
            except Exception as e:
                # pyserial's flush can raise termios.error, which is not an OSError
                failure = e
            else:
                self._last_activity = time.monotonic()
                logger.info(f"Sent to device: {line}")
                return

        self._mark_faulted(transport, failure)
        raise TransportError(self._port, str(failure)) from failure

    def send_command(self, command: Command) -> str:
        """
        Encode a validated command and send it.

        Returns:
            The wire line that was written (without the terminator)
        """
        line = encode(command)
        self.send(line)
        return line

    # =================================================================
    # Internals
    # =================================================================

    def _transition_locked(self, new_state: ConnectionState, transitions: list[Transition]) -> None:
        """Change state; caller holds _state_lock."""
        previous = self._state
        if previous is not new_state:
            self._state = new_state
            transitions.append((previous, new_state))

    def _set_state(self, new_state: ConnectionState, transitions: list[Transition]) -> None:
        with self._state_lock:
            self._transition_locked(new_state, transitions)

    def _notify(self, transitions: list[Transition]) -> None:
        for previous, current in transitions:
            logger.debug(f"Connection {self._port}: {previous.value} -> {current.value}")
            self._observers.notify("on_connection_state_changed", previous, current)

    def _open_locked(self, transitions: list[Transition]) -> None:
        """Open the transport; caller holds _lifecycle_lock."""
        if self._state is ConnectionState.OPEN:
            logger.debug(f"Already connected to {self._port}")
            return

        if self._transport is not None or self._state is ConnectionState.FAULTED:
            self._release_locked(transitions)

        self._set_state(ConnectionState.OPENING, transitions)
        try:
            transport = self._opener(self._port, self._read_timeout)
        except TransportUnavailableError:
            self._set_state(ConnectionState.FAULTED, transitions)
            raise
        except OSError as e:
            self._set_state(ConnectionState.FAULTED, transitions)
            raise wrap_serial_error(e, self._port) from e

        stop_event = threading.Event()
        reader = threading.Thread(
            target=self._read_loop,
            args=(transport, stop_event),
            name=f"ledbridge-reader-{self._port}",
            daemon=True,
        )

        with self._state_lock:
            self._transport = transport
            self._stop_event = stop_event
            self._reader_thread = reader
            self._last_activity = time.monotonic()
            self._transition_locked(ConnectionState.OPEN, transitions)

        reader.start()
        logger.info(f"Connected to {self._port}")

    def _release_locked(self, transitions: list[Transition]) -> None:
        """Drop the transport and stop the reader; caller holds _lifecycle_lock."""
        with self._state_lock:
            transport, self._transport = self._transport, None
            stop_event, self._stop_event = self._stop_event, None
            reader, self._reader_thread = self._reader_thread, None
            was_closed = self._state is ConnectionState.CLOSED
            self._transition_locked(ConnectionState.CLOSED, transitions)

        if stop_event is not None:
            stop_event.set()

        if transport is not None:
            # Waits for an in-flight write to finish
            with self._write_lock:
                try:
                    transport.close()
                except Exception as e:
                    logger.debug(f"Ignoring error while closing {self._port}: {e}")

        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=self._read_timeout + 1.0)
            if reader.is_alive():
                logger.warning(f"Serial reader for {self._port} did not stop in time")

        if not was_closed:
            logger.info(f"Disconnected from {self._port}")

    def _mark_faulted(self, transport: Transport, error: BaseException) -> None:
        """Move Open -> Faulted if `transport` is still the current handle."""
        transitions: list[Transition] = []
        with self._state_lock:
            if self._transport is transport and self._state is ConnectionState.OPEN:
                self._transition_locked(ConnectionState.FAULTED, transitions)
                if self._stop_event is not None:
                    self._stop_event.set()

        if transitions:
            logger.error(f"Connection to {self._port} faulted: {error}")
            self._notify(transitions)

    def _read_loop(self, transport: Transport, stop_event: threading.Event) -> None:
        """Reader thread: split incoming bytes into lines and decode them."""
        splitter = LineSplitter()
        logger.debug(f"Serial reader started for {self._port}")

        while not stop_event.is_set():
            try:
                chunk = transport.read(1)
            except Exception as e:
                if not stop_event.is_set():
                    self._mark_faulted(transport, e)
                break

            if not chunk:
                if not transport.is_open and not stop_event.is_set():
                    self._mark_faulted(transport, ConnectionError("port closed unexpectedly"))
                    break
                continue

            self._last_activity = time.monotonic()
            for raw in splitter.feed(chunk):
                self._handle_line(raw)

        logger.debug(f"Serial reader stopped for {self._port}")

    def _handle_line(self, raw: bytes) -> None:
        try:
            status = decode_status_line(raw)
        except DecodeError as e:
            logger.warning(f"Discarding device line: {e.technical_message}")
            return

        self._last_status = status
        logger.info(f"Device: {status.text}")
        self._observers.notify("on_status_line", status)
