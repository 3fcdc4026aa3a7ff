"""ledbridge: HTTP bridge to an Arduino LED strip controller over a serial link."""

__version__ = "0.1.0"

# Core
from .device import SerialConnectionManager
from .protocol import build_color_command, build_effect_command, encode

__all__ = [
    "SerialConnectionManager",
    "build_color_command",
    "build_effect_command",
    "encode",
]
