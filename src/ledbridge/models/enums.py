"""Enumerations for ledbridge."""

from enum import Enum, IntEnum


class ConnectionState(str, Enum):
    """Lifecycle state of the serial connection."""

    CLOSED = "closed"    # No transport handle held
    OPENING = "opening"  # Transport is being opened
    OPEN = "open"        # Ready to send commands
    FAULTED = "faulted"  # Transport failed, explicit reconnect required


class EffectId(IntEnum):
    """Built-in effects understood by the device firmware."""

    STATIC = 0
    RAINBOW = 1
    FADE = 2
    COLOR_CYCLE = 3
