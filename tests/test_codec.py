"""Tests for the device line protocol codec."""

import pytest
from pydantic import ValidationError

from ledbridge.exceptions import DecodeError, InvalidParameterError
from ledbridge.models import QueryStatus, Reset, Save, SetColor, SetEffect
from ledbridge.protocol import (
    BRIGHTNESS_RANGE_MESSAGE,
    EFFECT_NAMES,
    EFFECT_RANGE_MESSAGE,
    RGB_RANGE_MESSAGE,
    LineSplitter,
    build_color_command,
    build_effect_command,
    decode_status_line,
    effect_name,
    encode,
    parse_command_payload,
)


@pytest.mark.unit
class TestEncode:
    """Test wire encoding of commands."""

    def test_color(self):
        assert encode(build_color_command(255, 0, 0, 255)) == "<255, 0, 0, 255>"
        assert encode(build_color_command(12, 34, 56, 78)) == "<12, 34, 56, 78>"

    def test_color_default_brightness(self):
        command = build_color_command(0, 128, 255)
        assert command.brightness == 255
        assert encode(command) == "<0, 128, 255, 255>"

    def test_effect(self):
        assert encode(build_effect_command(1, 128)) == "<effect=1, 128>"
        assert encode(build_effect_command(2)) == "<effect=2, 255>"

    def test_system_commands(self):
        assert encode(Save()) == "<save>"
        assert encode(Reset()) == "<reset>"
        assert encode(QueryStatus()) == "<status>"

    def test_numeric_strings_are_coerced(self):
        """JSON clients sometimes send numbers as strings; the wire gets integers."""
        assert encode(build_color_command("255", "0", "0")) == "<255, 0, 0, 255>"

    def test_unknown_command_type(self):
        with pytest.raises(TypeError):
            encode("<save>")


@pytest.mark.unit
class TestValidation:
    """Test parameter validation before encoding."""

    @pytest.mark.parametrize("rgb", [(256, 0, 0), (0, -1, 0), (0, 0, 1000), ("abc", 0, 0), (None, 0, 0)])
    def test_invalid_rgb(self, rgb):
        with pytest.raises(InvalidParameterError) as exc_info:
            build_color_command(*rgb)
        assert exc_info.value.user_message == RGB_RANGE_MESSAGE

    @pytest.mark.parametrize("brightness", [0, 256, -5])
    def test_invalid_brightness(self, brightness):
        with pytest.raises(InvalidParameterError) as exc_info:
            build_color_command(10, 20, 30, brightness)
        assert exc_info.value.user_message == BRIGHTNESS_RANGE_MESSAGE
        assert exc_info.value.field == "brightness"

        with pytest.raises(InvalidParameterError) as exc_info:
            build_effect_command(0, brightness)
        assert exc_info.value.user_message == BRIGHTNESS_RANGE_MESSAGE

    @pytest.mark.parametrize("effect", [4, -1, 99, None])
    def test_invalid_effect(self, effect):
        with pytest.raises(InvalidParameterError) as exc_info:
            build_effect_command(effect)
        assert exc_info.value.user_message == "Efeito deve estar entre 0 e 3"
        assert exc_info.value.user_message == EFFECT_RANGE_MESSAGE

    def test_rgb_reported_before_brightness(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            build_color_command(300, 0, 0, 0)
        assert exc_info.value.user_message == RGB_RANGE_MESSAGE

    def test_boundaries_accepted(self):
        assert build_color_command(0, 0, 0, 1).brightness == 1
        assert build_color_command(255, 255, 255, 255).r == 255
        assert build_effect_command(0).effect == 0
        assert build_effect_command(3).effect == 3

    def test_commands_are_immutable(self):
        command = build_color_command(1, 2, 3)
        with pytest.raises(ValidationError):
            command.r = 200

    def test_color_property(self):
        assert build_color_command(1, 2, 3).color.to_rgb_tuple() == (1, 2, 3)


@pytest.mark.unit
class TestEffectNames:
    """Test the effect name table."""

    def test_names(self):
        assert [effect_name(i) for i in range(4)] == ["Estático", "Rainbow", "Fade", "Color Cycle"]
        assert len(EFFECT_NAMES) == 4

    @pytest.mark.parametrize("effect_id", [4, -1, True, "1"])
    def test_out_of_range(self, effect_id):
        with pytest.raises(InvalidParameterError):
            effect_name(effect_id)


@pytest.mark.unit
class TestParsePayload:
    """Test building commands from request bodies."""

    def test_color(self):
        command = parse_command_payload("color", {"r": 1, "g": 2, "b": 3, "brightness": 4})
        assert isinstance(command, SetColor)
        assert encode(command) == "<1, 2, 3, 4>"

    def test_effect_ignores_unrelated_fields(self):
        command = parse_command_payload("effect", {"action": "effect", "effect": 3})
        assert isinstance(command, SetEffect)
        assert command.brightness == 255

    def test_system_commands(self):
        assert isinstance(parse_command_payload("save"), Save)
        assert isinstance(parse_command_payload("reset", {}), Reset)
        assert isinstance(parse_command_payload("status", None), QueryStatus)

    def test_missing_fields(self):
        with pytest.raises(InvalidParameterError):
            parse_command_payload("color", {})

    def test_unknown_kind(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            parse_command_payload("blink", {})
        assert exc_info.value.user_message == "Invalid action"


@pytest.mark.unit
class TestLineSplitter:
    """Test reassembling lines from serial reads."""

    def test_partial_reads(self):
        splitter = LineSplitter()
        assert splitter.feed(b"Cor: 255") == []
        assert splitter.feed(b", 0, 0\r\nEfei") == [b"Cor: 255, 0, 0"]
        assert splitter.pending == len(b"Efei")
        assert splitter.feed(b"to: 1\n") == [b"Efeito: 1"]
        assert splitter.pending == 0

    def test_several_lines_in_one_read(self):
        splitter = LineSplitter()
        assert splitter.feed(b"a\nb\r\nc\n") == [b"a", b"b", b"c"]

    def test_blank_lines_dropped(self):
        splitter = LineSplitter()
        assert splitter.feed(b"\r\n\n  \n") == []

    def test_overlong_partial_line_discarded(self):
        splitter = LineSplitter(max_length=8)
        assert splitter.feed(b"0123456789") == []
        assert splitter.pending == 0
        assert splitter.feed(b"ok\n") == [b"ok"]

    def test_reset(self):
        splitter = LineSplitter()
        splitter.feed(b"partial")
        splitter.reset()
        assert splitter.feed(b"line\n") == [b"line"]


@pytest.mark.unit
class TestDecodeStatusLine:
    """Test decoding lines printed by the device."""

    def test_plain_text(self):
        line = decode_status_line(b"Efeito: Rainbow")
        assert line.text == "Efeito: Rainbow"
        assert line.fields == ()
        assert not line.is_framed

    def test_framed_fields(self):
        line = decode_status_line(b"<255, 0, 0, 128>\r")
        assert line.fields == ("255", "0", "0", "128")
        assert line.is_framed

    def test_utf8_text(self):
        assert decode_status_line("Modo: Estático".encode("utf-8")).text == "Modo: Estático"

    @pytest.mark.parametrize("raw", [b"", b"   ", b"\r"])
    def test_empty(self, raw):
        with pytest.raises(DecodeError):
            decode_status_line(raw)

    def test_binary_noise(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_status_line(b"\xff\xfe\x80")
        assert exc_info.value.raw == b"\xff\xfe\x80"

    def test_control_characters(self):
        with pytest.raises(DecodeError):
            decode_status_line(b"ab\x00cd")
