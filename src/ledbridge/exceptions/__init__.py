"""
Custom exception hierarchy for ledbridge.

## Exception Hierarchy

```
LedBridgeError (base)
├── TransportUnavailableError   serial port could not be opened
├── NotConnectedError           send attempted while the link is not open
├── TransportError              I/O failure during an open session
├── InvalidParameterError       command validation failed (never sent)
├── DecodeError                 malformed line received from the device
├── GatewayRequestError         HTTP client got an error from the gateway
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `LedBridgeError`, which provides:

- `user_message`: Human-friendly message for display to users
- `technical_message`: Detailed message for logging
- `http_status`: Status the gateway answers with (400 for bad parameters, else 500)
- `recovery_hint`: Optional suggestion for how to fix the issue

### Example: Serial port missing

```python
from ledbridge.exceptions import wrap_serial_error

try:
    handle = serial.Serial(port, 9600)
except serial.SerialException as e:
    raise wrap_serial_error(e, port) from e

# User sees: "Serial device /dev/ttyUSB0 not found."
# Recovery hint: "Check the cable and run 'ledbridge ports' ..."
```

See `ledbridge.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import LedBridgeError
from .client import GatewayRequestError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import (
    format_error_for_display,
    wrap_pydantic_error,
    wrap_serial_error,
)
from .protocol import DecodeError, InvalidParameterError
from .transport import NotConnectedError, TransportError, TransportUnavailableError

__all__ = [
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Protocol
    "DecodeError",
    "InvalidParameterError",
    # Client
    "GatewayRequestError",
    # Handlers
    "format_error_for_display",
    "wrap_pydantic_error",
    "wrap_serial_error",
    # Base
    "LedBridgeError",
    # Transport
    "NotConnectedError",
    "TransportError",
    "TransportUnavailableError",
]
