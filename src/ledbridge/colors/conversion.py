"""RGB / HSB / hex conversions.

These functions are the single implementation used both for the color
picker preview and for server-side validation, so the color a user sees
is the color that reaches the strip.

Rounding is half-up (like the browser's `Math.round`) rather than Python's
banker's rounding, so values match what the web UI displays.
"""

import math
import re
from typing import Optional

from ledbridge.exceptions import InvalidParameterError
from ledbridge.models import HSB, Color

_HEX_PATTERN = re.compile(r"#?([0-9a-fA-F]{6})")


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _check_channel(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
        raise InvalidParameterError(name, value, "Valores RGB devem estar entre 0 e 255")


def rgb_to_hsb(r: int, g: int, b: int) -> HSB:
    """
    Convert 8-bit RGB channels to HSB.

    Hue is kept fractional so that converting back with `hsb_to_rgb`
    reproduces every channel within one step.

    Args:
        r, g, b: Channels in 0-255

    Returns:
        HSB with h in [0, 360), s in 0-100 and v in 0-255.
        Achromatic input (r == g == b) yields h == 0.

    Example:
        >>> rgb_to_hsb(255, 0, 0)
        HSB(h=0.0, s=100, v=255)
    """
    for name, value in (("r", r), ("g", g), ("b", b)):
        _check_channel(name, value)

    red, green, blue = r / 255, g / 255, b / 255
    high = max(red, green, blue)
    low = min(red, green, blue)
    diff = high - low

    sector = 0.0
    if diff != 0:
        if high == red:
            # fmod keeps the sign; negative hues are wrapped below
            sector = math.fmod((green - blue) / diff, 6)
        elif high == green:
            sector = (blue - red) / diff + 2
        else:
            sector = (red - green) / diff + 4

    hue = sector * 60
    if hue < 0:
        hue += 360
    if hue >= 360:
        hue -= 360

    saturation = 0 if high == 0 else round_half_up(diff / high * 100)
    brightness = round_half_up(high * 255)

    return HSB(h=hue, s=saturation, v=brightness)


def hsb_to_rgb(h: float, s: float, v: float) -> Color:
    """
    Convert HSB to 8-bit RGB.

    Args:
        h: Hue in degrees (any value, wrapped into [0, 360))
        s: Saturation in percent (0-100)
        v: Brightness (0-255)

    Returns:
        Color with every channel clamped into 0-255

    Example:
        >>> hsb_to_rgb(120, 100, 255)
        Color(r=0, g=255, b=0)
    """
    hue = h % 360
    sat = s / 100
    value = v / 255

    chroma = value * sat
    x = chroma * (1 - abs((hue / 60) % 2 - 1))
    m = value - chroma

    if hue < 60:
        red, green, blue = chroma, x, 0.0
    elif hue < 120:
        red, green, blue = x, chroma, 0.0
    elif hue < 180:
        red, green, blue = 0.0, chroma, x
    elif hue < 240:
        red, green, blue = 0.0, x, chroma
    elif hue < 300:
        red, green, blue = x, 0.0, chroma
    else:
        red, green, blue = chroma, 0.0, x

    return Color(
        r=_clamp(round_half_up((red + m) * 255), 0, 255),
        g=_clamp(round_half_up((green + m) * 255), 0, 255),
        b=_clamp(round_half_up((blue + m) * 255), 0, 255),
    )


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """
    Encode RGB channels as six lowercase, zero-padded hex digits (no '#').

    Raises:
        InvalidParameterError: If a channel is not an integer in 0-255
    """
    for name, value in (("r", r), ("g", g), ("b", b)):
        _check_channel(name, value)
    return f"{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(text: str) -> Optional[Color]:
    """
    Decode a hex color such as "ff8000" or "#FF8000".

    Returns:
        The Color, or None unless the input is exactly six hex digits
        after an optional leading '#'
    """
    if not isinstance(text, str):
        return None

    match = _HEX_PATTERN.fullmatch(text)
    if match is None:
        return None

    digits = match.group(1)
    return Color(r=int(digits[0:2], 16), g=int(digits[2:4], 16), b=int(digits[4:6], 16))
