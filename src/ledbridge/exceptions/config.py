"""Errors raised while loading `~/.ledbridge/config.json`.

- ConfigurationError: Base class, catch this to report any config problem
- ConfigFileInvalidError: The file is empty, unreadable or not JSON
- ConfigValidationError: The JSON parsed but a setting is out of range
"""

import re
from typing import Any, Optional

from .base import LedBridgeError

_POSITION = re.compile(r"line (\d+) column (\d+)")

_FIELD_HINTS = {
    "serial_port": "Run 'ledbridge ports' to see available serial devices.",
    "http_port": "Use a free TCP port between 1 and 65535.",
    "api_prefix": "Use a path such as '/api', or an empty string to serve from the root.",
    "read_timeout": "Use a positive number of seconds, e.g. 1.0.",
    "reconnect_delay": "Use a number of seconds, 0 or more.",
}


class ConfigurationError(LedBridgeError):
    """Configuration file could not be used."""


class ConfigFileInvalidError(ConfigurationError):
    """Configuration file is not valid JSON."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Args:
            file_path: Path to the config file
            parse_error: Parser message, usually ending in "line N column M"
        """
        match = _POSITION.search(parse_error)
        where = f" (line {match.group(1)}, column {match.group(2)})" if match else ""

        if "trailing comma" in parse_error.lower():
            user_msg = f"Configuration file has a trailing comma{where}"
            recovery = f"Remove the comma after the last item in {file_path}."
        else:
            user_msg = f"Configuration file has invalid syntax{where}"
            recovery = (
                f"Fix {file_path} by hand, delete it to fall back to defaults, "
                "or rewrite it with 'ledbridge config init --force'."
            )

        super().__init__(
            user_message=user_msg,
            technical_message=f"Cannot parse {file_path}: {parse_error}",
            recovery_hint=recovery,
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """A configuration value is missing, mistyped or out of range."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: Optional[str] = None):
        """
        Args:
            field: Setting that failed (dotted path for nested values)
            value: The rejected value
            error_msg: Why the value was rejected
            file_path: Config file the value came from, if any
        """
        hint = _FIELD_HINTS.get(field.split(".")[0], f"Correct '{field}' in the configuration.")
        if file_path:
            hint += f"\nConfig file: {file_path}"

        super().__init__(
            user_message=f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            recovery_hint=hint,
        )
        self.field = field
        self.value = value
        self.file_path = file_path
