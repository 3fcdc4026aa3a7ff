"""Serial byte-stream transport.

The connection manager never touches pyserial directly: it asks a
`TransportOpener` for a `Transport` and only uses write/read/close on it.
Tests substitute an in-memory transport through the same seam.
"""

import logging
from typing import Callable, NamedTuple, Protocol, runtime_checkable

import serial
from serial.tools import list_ports

from ledbridge.exceptions import wrap_serial_error

logger = logging.getLogger(__name__)

# Fixed link settings of the controller firmware (Serial.begin(9600))
BAUD_RATE = 9600
BYTESIZE = serial.EIGHTBITS
PARITY = serial.PARITY_NONE
STOPBITS = serial.STOPBITS_ONE


@runtime_checkable
class Transport(Protocol):
    """Open byte stream to the device."""

    @property
    def is_open(self) -> bool:
        ...

    def write(self, data: bytes) -> None:
        """Write all bytes or raise."""
        ...

    def read(self, size: int = 1) -> bytes:
        """Read up to `size` bytes; return b"" when the read timeout expires."""
        ...

    def close(self) -> None:
        ...


TransportOpener = Callable[[str, float], Transport]
"""Factory taking (port, read_timeout) and returning an open transport."""


class SerialTransport:
    """Transport backed by a pyserial `Serial` handle."""

    def __init__(self, handle: serial.Serial):
        self._handle = handle

    @property
    def port(self) -> str:
        return self._handle.port

    @property
    def is_open(self) -> bool:
        return bool(self._handle.is_open)

    def write(self, data: bytes) -> None:
        self._handle.write(data)
        self._handle.flush()

    def read(self, size: int = 1) -> bytes:
        # Block for at least one byte (bounded by the timeout), then drain what is waiting
        waiting = self._handle.in_waiting
        return self._handle.read(max(size, waiting))

    def close(self) -> None:
        self._handle.close()


def open_serial_transport(port: str, read_timeout: float = 1.0) -> SerialTransport:
    """
    Open a serial port with the firmware's fixed settings (9600 8-N-1, no flow control).

    Args:
        port: Device path (e.g. /dev/ttyUSB0, COM3)
        read_timeout: Read timeout in seconds

    Returns:
        An open SerialTransport

    Raises:
        TransportUnavailableError: If the port is missing, busy or not permitted
    """
    try:
        handle = serial.Serial(
            port=port,
            baudrate=BAUD_RATE,
            bytesize=BYTESIZE,
            parity=PARITY,
            stopbits=STOPBITS,
            timeout=read_timeout,
            xonxoff=False,
            rtscts=False,
            dsrdtr=False,
        )
    except (serial.SerialException, OSError, ValueError) as e:
        raise wrap_serial_error(e, port) from e

    logger.debug(f"Opened serial port {port} at {BAUD_RATE} baud")
    return SerialTransport(handle)


class SerialPortInfo(NamedTuple):
    """A serial port found on the host."""

    device: str
    description: str
    hwid: str


def list_serial_ports() -> list[SerialPortInfo]:
    """List serial ports present on the host, sorted by device path."""
    ports = [
        SerialPortInfo(device=p.device, description=p.description or "", hwid=p.hwid or "")
        for p in list_ports.comports()
    ]
    return sorted(ports, key=lambda p: p.device)
