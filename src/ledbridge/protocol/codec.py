"""Text line protocol spoken by the LED controller firmware.

Commands are ASCII lines framed by angle brackets; the connection manager
appends the newline terminator when it writes them:

    <255, 0, 0, 255>        static color: r, g, b, brightness
    <effect=1, 128>         built-in effect: id, brightness
    <save>                  persist settings to EEPROM
    <reset>                 restore factory settings
    <status>                ask the firmware to print its settings

Validation always happens before encoding, so a command that reaches the
transport is known to be in range. The firmware does not acknowledge
commands; whatever it prints is decoded by `decode_status_line` for
logging only.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ledbridge.exceptions import DecodeError, InvalidParameterError
from ledbridge.models import (
    DEFAULT_BRIGHTNESS,
    Command,
    QueryStatus,
    Reset,
    Save,
    SetColor,
    SetEffect,
)

logger = logging.getLogger(__name__)

# Index is the effect id sent on the wire
EFFECT_NAMES: tuple[str, ...] = ("Estático", "Rainbow", "Fade", "Color Cycle")
EFFECT_DESCRIPTIONS: tuple[str, ...] = (
    "Cor fixa",
    "Arco-íris giratório",
    "Esmaecimento",
    "Mudança gradual",
)

RGB_RANGE_MESSAGE = "Valores RGB devem estar entre 0 e 255"
BRIGHTNESS_RANGE_MESSAGE = "Brilho deve estar entre 1 e 255"
EFFECT_RANGE_MESSAGE = "Efeito deve estar entre 0 e 3"

_FIELD_MESSAGES = {
    "r": RGB_RANGE_MESSAGE,
    "g": RGB_RANGE_MESSAGE,
    "b": RGB_RANGE_MESSAGE,
    "brightness": BRIGHTNESS_RANGE_MESSAGE,
    "effect": EFFECT_RANGE_MESSAGE,
}

LINE_TERMINATOR = b"\n"
MAX_LINE_LENGTH = 512


def _build(model_type: type[BaseModel], **values: Any) -> Any:
    """Construct a command model, converting validation failures."""
    if values.get("brightness") is None:
        values["brightness"] = DEFAULT_BRIGHTNESS

    try:
        return model_type(**values)
    except ValidationError as e:
        # Report the first failing field, in declaration order (RGB before brightness)
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else "unknown"
        raise InvalidParameterError(
            field, values.get(field), _FIELD_MESSAGES.get(field, first["msg"])
        ) from e


def build_color_command(r: Any, g: Any, b: Any, brightness: Any = None) -> SetColor:
    """
    Validate parameters and build a static color command.

    Args:
        r, g, b: Channels in 0-255
        brightness: 1-255, defaults to 255 when None

    Raises:
        InvalidParameterError: If any parameter is out of range
    """
    return _build(SetColor, r=r, g=g, b=b, brightness=brightness)


def build_effect_command(effect: Any, brightness: Any = None) -> SetEffect:
    """
    Validate parameters and build an effect command.

    Args:
        effect: Effect id in 0-3 (see EFFECT_NAMES)
        brightness: 1-255, defaults to 255 when None

    Raises:
        InvalidParameterError: If any parameter is out of range
    """
    return _build(SetEffect, effect=effect, brightness=brightness)


def parse_command_payload(kind: str, payload: Optional[Mapping[str, Any]] = None) -> Command:
    """
    Build a command from a JSON-style request body.

    Args:
        kind: "color", "effect", "save", "reset" or "status"
        payload: Request body; only the fields relevant to `kind` are read

    Raises:
        InvalidParameterError: If the kind is unknown or a field is invalid
    """
    payload = payload or {}

    if kind == "color":
        return build_color_command(
            payload.get("r"), payload.get("g"), payload.get("b"), payload.get("brightness")
        )
    if kind == "effect":
        return build_effect_command(payload.get("effect"), payload.get("brightness"))
    if kind == "save":
        return Save()
    if kind == "reset":
        return Reset()
    if kind == "status":
        return QueryStatus()

    raise InvalidParameterError("action", kind, "Invalid action")


def effect_name(effect_id: int) -> str:
    """
    Look up the display name of an effect.

    Raises:
        InvalidParameterError: If the id is outside the effect table
    """
    if isinstance(effect_id, bool) or not isinstance(effect_id, int) or not (
        0 <= effect_id < len(EFFECT_NAMES)
    ):
        raise InvalidParameterError("effect", effect_id, EFFECT_RANGE_MESSAGE)
    return EFFECT_NAMES[effect_id]


def encode(command: Command) -> str:
    """
    Encode a validated command as a wire line (without the newline).

    Example:
        >>> encode(build_color_command(255, 0, 0))
        '<255, 0, 0, 255>'
    """
    match command:
        case SetColor(r=r, g=g, b=b, brightness=brightness):
            return f"<{r}, {g}, {b}, {brightness}>"
        case SetEffect(effect=effect, brightness=brightness):
            return f"<effect={effect}, {brightness}>"
        case Save():
            return "<save>"
        case Reset():
            return "<reset>"
        case QueryStatus():
            return "<status>"

    raise TypeError(f"Cannot encode {type(command).__name__}")


class StatusLine(BaseModel):
    """One line printed by the firmware."""

    model_config = ConfigDict(frozen=True)

    text: str
    fields: tuple[str, ...] = ()

    @property
    def is_framed(self) -> bool:
        """True when the line used the <a, b, ...> framing."""
        return bool(self.fields)


def decode_status_line(raw: bytes) -> StatusLine:
    """
    Decode a device line (terminator already removed).

    Raises:
        DecodeError: If the line is empty, not valid UTF-8, or contains
            control characters (typically baud-rate noise after a reset)
    """
    data = raw.rstrip(b"\r\n")
    if not data.strip():
        raise DecodeError(raw, "empty line")

    try:
        text = data.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise DecodeError(raw, f"not UTF-8 ({e.reason})") from e

    if any(ord(ch) < 32 and ch != "\t" for ch in text):
        raise DecodeError(raw, "control characters in line")

    fields: tuple[str, ...] = ()
    if len(text) >= 2 and text.startswith("<") and text.endswith(">"):
        fields = tuple(part.strip() for part in text[1:-1].split(","))

    return StatusLine(text=text, fields=fields)


class LineSplitter:
    """
    Reassemble newline-terminated lines from arbitrary serial reads.

    Blank lines are dropped. A partial line that grows beyond `max_length`
    without a terminator is discarded so a noisy link cannot grow the buffer
    without bound.
    """

    def __init__(self, max_length: int = MAX_LINE_LENGTH):
        self._buffer = bytearray()
        self._max_length = max_length

    def feed(self, data: bytes) -> list[bytes]:
        """Add received bytes and return every line completed by them."""
        self._buffer.extend(data)
        lines: list[bytes] = []

        while True:
            index = self._buffer.find(LINE_TERMINATOR)
            if index < 0:
                break
            line = bytes(self._buffer[:index]).rstrip(b"\r")
            del self._buffer[: index + 1]
            if line.strip():
                lines.append(line)

        if len(self._buffer) > self._max_length:
            logger.warning(f"Discarding {len(self._buffer)} bytes without line terminator")
            self._buffer.clear()

        return lines

    def reset(self) -> None:
        """Drop any partial line."""
        self._buffer.clear()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet terminated."""
        return len(self._buffer)
