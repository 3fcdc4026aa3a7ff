"""Serial link to the LED controller: transport and connection manager."""

from .connection import SerialConnectionManager
from .transport import (
    BAUD_RATE,
    SerialPortInfo,
    SerialTransport,
    Transport,
    TransportOpener,
    list_serial_ports,
    open_serial_transport,
)

__all__ = [
    "BAUD_RATE",
    "SerialConnectionManager",
    "SerialPortInfo",
    "SerialTransport",
    "Transport",
    "TransportOpener",
    "list_serial_ports",
    "open_serial_transport",
]
