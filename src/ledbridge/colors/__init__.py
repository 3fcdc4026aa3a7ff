"""Color palette and color model conversions.

All colors are standard 8-bit RGB `Color` values; the device receives them
unchanged (brightness travels as a separate command field).

```python
from ledbridge.colors import COLORS, rgb_to_hsb, hsb_to_rgb

hsb = rgb_to_hsb(*COLORS.ORANGE.to_rgb_tuple())   # HSB(h=38.8..., s=100, v=255)
hsb_to_rgb(hsb.h, hsb.s, hsb.v)                    # Color(r=255, g=165, b=0)
```
"""

from ledbridge.models import Color

from .conversion import hex_to_rgb, hsb_to_rgb, rgb_to_hex, rgb_to_hsb
from .picker import PickerRect, pointer_position_to_hue, pointer_position_to_saturation_brightness


class COLORS:
    """Standard color constants - 8-bit RGB (0-255)."""

    RED: Color = Color(r=255, g=0, b=0)
    GREEN: Color = Color(r=0, g=255, b=0)
    BLUE: Color = Color(r=0, g=0, b=255)
    YELLOW: Color = Color(r=255, g=255, b=0)
    MAGENTA: Color = Color(r=255, g=0, b=255)
    CYAN: Color = Color(r=0, g=255, b=255)
    WHITE: Color = Color(r=255, g=255, b=255)
    ORANGE: Color = Color(r=255, g=165, b=0)
    BLACK: Color = Color(r=0, g=0, b=0)


# Quick-pick swatches shown by the web UI, in display order
PRESET_COLORS: list[tuple[str, Color]] = [
    ("Vermelho", COLORS.RED),
    ("Verde", COLORS.GREEN),
    ("Azul", COLORS.BLUE),
    ("Amarelo", COLORS.YELLOW),
    ("Magenta", COLORS.MAGENTA),
    ("Ciano", COLORS.CYAN),
    ("Branco", COLORS.WHITE),
    ("Laranja", COLORS.ORANGE),
]

__all__ = [
    "COLORS",
    "PRESET_COLORS",
    "PickerRect",
    "hex_to_rgb",
    "hsb_to_rgb",
    "pointer_position_to_hue",
    "pointer_position_to_saturation_brightness",
    "rgb_to_hex",
    "rgb_to_hsb",
]
