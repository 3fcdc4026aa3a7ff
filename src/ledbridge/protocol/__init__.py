"""Wire protocol of the LED controller firmware."""

from .codec import (
    BRIGHTNESS_RANGE_MESSAGE,
    EFFECT_DESCRIPTIONS,
    EFFECT_NAMES,
    EFFECT_RANGE_MESSAGE,
    RGB_RANGE_MESSAGE,
    LineSplitter,
    StatusLine,
    build_color_command,
    build_effect_command,
    decode_status_line,
    effect_name,
    encode,
    parse_command_payload,
)

__all__ = [
    "BRIGHTNESS_RANGE_MESSAGE",
    "EFFECT_DESCRIPTIONS",
    "EFFECT_NAMES",
    "EFFECT_RANGE_MESSAGE",
    "LineSplitter",
    "RGB_RANGE_MESSAGE",
    "StatusLine",
    "build_color_command",
    "build_effect_command",
    "decode_status_line",
    "effect_name",
    "encode",
    "parse_command_payload",
]
