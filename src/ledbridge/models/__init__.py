"""Data models for ledbridge."""

from .color import HSB, Color
from .commands import (
    DEFAULT_BRIGHTNESS,
    Command,
    QueryStatus,
    Reset,
    Save,
    SetColor,
    SetEffect,
)
from .config import AppConfig
from .enums import ConnectionState, EffectId

__all__ = [
    "AppConfig",
    # Models
    "Color",
    "Command",
    "DEFAULT_BRIGHTNESS",
    "HSB",
    "QueryStatus",
    "Reset",
    "Save",
    "SetColor",
    "SetEffect",
    # Enums
    "ConnectionState",
    "EffectId",
]
