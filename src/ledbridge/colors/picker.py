"""Pointer-to-color mapping for the saturation/brightness panel and hue slider.

The picker UI is a square panel (saturation grows left to right, brightness
grows bottom to top) plus a horizontal hue slider. These functions turn a
pointer position into picker values without depending on any toolkit:
callers pass the pointer coordinates and the widget's bounding rectangle
in the same coordinate space.
"""

from typing import NamedTuple

from ledbridge.exceptions import InvalidParameterError

from .conversion import round_half_up


class PickerRect(NamedTuple):
    """Bounding rectangle of a picker widget."""

    left: float
    top: float
    width: float
    height: float


def _fraction(position: float, start: float, length: float, field: str) -> float:
    if length <= 0:
        raise InvalidParameterError(field, length, "Picker area must have a positive size")
    return max(0.0, min(1.0, (position - start) / length))


def pointer_position_to_saturation_brightness(
    x: float, y: float, rect: PickerRect
) -> tuple[int, int]:
    """
    Map a pointer position on the saturation/brightness panel.

    Positions outside the panel are clamped to its edges, so dragging past
    the border keeps the extreme value.

    Returns:
        (saturation 0-100, brightness 0-255)
    """
    fx = _fraction(x, rect.left, rect.width, "width")
    fy = _fraction(y, rect.top, rect.height, "height")
    return round_half_up(fx * 100), round_half_up((1 - fy) * 255)


def pointer_position_to_hue(x: float, rect: PickerRect) -> int:
    """
    Map a pointer position on the hue slider to a hue in [0, 360).

    The right edge wraps around to 0 (red), the same color as the left edge.
    """
    fx = _fraction(x, rect.left, rect.width, "width")
    return round_half_up(fx * 360) % 360
