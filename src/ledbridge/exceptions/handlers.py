"""
Translation of library errors into ledbridge errors.

```
┌─────────────────────────────────────┐
│  HTTP gateway / CLI                 │
│  - status code from http_status     │
│  - prints recovery_hint             │
└─────────────────────────────────────┘
                  ↑ LedBridgeError
┌─────────────────────────────────────┐
│  codec, connection manager, config  │
└─────────────────────────────────────┘
                  ↑ SerialException, OSError, ValidationError
┌─────────────────────────────────────┐
│  pyserial, OS, pydantic             │
└─────────────────────────────────────┘
```

| Scenario | Use This |
|----------|----------|
| Serial port fails to open | `raise wrap_serial_error(e, port) from e` |
| Config JSON fails validation | `raise wrap_pydantic_error(e, path) from e` |
| Show an error on the terminal | `message, hint = format_error_for_display(e)` |
"""

import errno
from collections.abc import Iterator
from typing import Optional

from pydantic import ValidationError

from .base import LedBridgeError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .transport import TransportUnavailableError

_NOT_FOUND_TEXT = ("no such file", "cannot find the file")
_BUSY_TEXT = ("resource busy",)
_PERMISSION_TEXT = ("permission denied", "access is denied")


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield the error and the exceptions it wraps."""
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def wrap_serial_error(error: Exception, port: str) -> TransportUnavailableError:
    """
    Classify a failure to open a serial port.

    pyserial raises SerialException carrying the OS errno when it knows it;
    on Windows only the message text tells the cases apart, so both the errno
    of every chained exception and the text are checked.

    Returns:
        TransportUnavailableError with reason "not_found", "busy",
        "permission" or "unavailable"
    """
    text = str(error)
    lowered = text.lower()
    codes = {getattr(e, "errno", None) for e in _error_chain(error)}

    if errno.ENOENT in codes or any(s in lowered for s in _NOT_FOUND_TEXT):
        reason = "not_found"
    elif errno.EBUSY in codes or any(s in lowered for s in _BUSY_TEXT):
        reason = "busy"
    elif errno.EACCES in codes or any(s in lowered for s in _PERMISSION_TEXT):
        reason = "permission"
    else:
        reason = "unavailable"

    return TransportUnavailableError(port=port, reason=reason, original_error=text)


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "config"


def wrap_pydantic_error(error: ValidationError, file_path: str) -> ConfigurationError:
    """
    Convert a failed `model_validate_json` into a configuration error.

    JSON syntax problems become ConfigFileInvalidError; everything else is
    a ConfigValidationError naming the first bad field (or all of them).
    """
    errors = error.errors()

    for item in errors:
        if item["type"] == "json_invalid":
            parse_error = item.get("ctx", {}).get("error") or item["msg"]
            return ConfigFileInvalidError(file_path, str(parse_error))

    if len(errors) == 1:
        item = errors[0]
        return ConfigValidationError(
            field=_field_path(item["loc"]),
            value=item.get("input"),
            error_msg=item["msg"],
            file_path=file_path,
        )

    summary = "\n".join(f"  - {_field_path(item['loc'])}: {item['msg']}" for item in errors)
    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(errors)} validation errors:\n{summary}",
        file_path=file_path,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Message and recovery hint for terminal output.

    Non-ledbridge errors are shown as "<Type>: <text>" without a hint.
    """
    if isinstance(error, LedBridgeError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None
