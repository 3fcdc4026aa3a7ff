"""Device command models.

Commands are immutable values: built once from request parameters,
encoded once by `ledbridge.protocol.codec`, then discarded.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .color import Color

DEFAULT_BRIGHTNESS = 255
MIN_BRIGHTNESS = 1
MAX_BRIGHTNESS = 255
MAX_EFFECT_ID = 3


class SetColor(BaseModel):
    """Show a static RGB color at the given brightness."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["color"] = "color"
    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)
    brightness: int = Field(default=DEFAULT_BRIGHTNESS, ge=MIN_BRIGHTNESS, le=MAX_BRIGHTNESS)

    @property
    def color(self) -> Color:
        return Color(r=self.r, g=self.g, b=self.b)


class SetEffect(BaseModel):
    """Run one of the firmware's built-in effects."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["effect"] = "effect"
    effect: int = Field(ge=0, le=MAX_EFFECT_ID)
    brightness: int = Field(default=DEFAULT_BRIGHTNESS, ge=MIN_BRIGHTNESS, le=MAX_BRIGHTNESS)


class Save(BaseModel):
    """Persist the current settings to the device EEPROM."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["save"] = "save"


class Reset(BaseModel):
    """Restore the device's factory settings."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["reset"] = "reset"


class QueryStatus(BaseModel):
    """Ask the device to print its current settings on the serial line."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["status"] = "status"


Command = Annotated[
    Union[SetColor, SetEffect, Save, Reset, QueryStatus],
    Field(discriminator="kind"),
]
