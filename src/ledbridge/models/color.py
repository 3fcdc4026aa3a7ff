"""Color models for LED control."""

from pydantic import BaseModel, ConfigDict, Field


class Color(BaseModel):
    """Standard 8-bit RGB color model.

    This is the only color representation that travels to the device.
    HSB and hex forms are derived from it by `ledbridge.colors.conversion`.

    The model is frozen so colors can be shared between request handlers
    and used as dictionary keys.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    @classmethod
    def off(cls) -> "Color":
        """Create off (black) color."""
        return cls(r=0, g=0, b=0)

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to a lowercase hex string without the leading '#'.

        Example:
            >>> Color(r=255, g=8, b=0).to_hex()
            'ff0800'
        """
        return f"{self.r:02x}{self.g:02x}{self.b:02x}"


class HSB(BaseModel):
    """Hue / saturation / brightness triple used by the color picker.

    Hue is in degrees (fractional when derived from RGB), saturation in
    whole percent and brightness on the same 0-255 scale as the RGB channels.
    """

    model_config = ConfigDict(frozen=True)

    h: float = Field(ge=0, lt=360, description="Hue in degrees [0, 360)")
    s: int = Field(ge=0, le=100, description="Saturation in percent (0-100)")
    v: int = Field(ge=0, le=255, description="Brightness (0-255)")

    def to_tuple(self) -> tuple[float, int, int]:
        """Convert to (h, s, v) tuple."""
        return (self.h, self.s, self.v)
