"""HTTP client for the ledbridge gateway, plus a background status poller.

```python
with BridgeClient("http://raspberrypi.local:3001") as client:
    client.set_color(255, 128, 0, brightness=200)
    client.save()
```
"""

import logging
import threading
from typing import Any, Callable, Optional

import httpx

from ledbridge.exceptions import GatewayRequestError
from ledbridge.models import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_POLL_INTERVAL = 5.0


class BridgeClient:
    """Synchronous client for the gateway's JSON API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_prefix: str = "/api",
        timeout: float = 5.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Gateway root URL
            api_prefix: Route prefix configured on the gateway
            timeout: Request timeout in seconds
            http_client: Preconfigured httpx client (e.g. with a mock transport);
                base_url and timeout are ignored when given
        """
        self._prefix = api_prefix.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: AppConfig, timeout: float = 5.0) -> "BridgeClient":
        """Client for a gateway started with `config` on this machine."""
        # A wildcard bind address is reachable through loopback
        host = "localhost" if config.http_host in ("0.0.0.0", "::", "") else config.http_host
        return cls(
            base_url=f"http://{host}:{config.http_port}",
            api_prefix=config.api_prefix,
            timeout=timeout,
        )

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "BridgeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _request(self, method: str, endpoint: str, json: Any = None) -> Any:
        path = f"{self._prefix}{endpoint}"
        try:
            response = self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise GatewayRequestError(path, str(e) or type(e).__name__) from e

        if response.is_success:
            return response.json()

        try:
            message = response.json().get("error", response.reason_phrase)
        except (ValueError, AttributeError):
            message = response.text or response.reason_phrase
        raise GatewayRequestError(path, message, response.status_code)

    def status(self) -> dict[str, Any]:
        """Connection status: {connected, port, state}."""
        return self._request("GET", "/status")

    def set_color(self, r: int, g: int, b: int, brightness: Optional[int] = None) -> dict[str, Any]:
        body: dict[str, Any] = {"r": r, "g": g, "b": b}
        if brightness is not None:
            body["brightness"] = brightness
        return self._request("POST", "/color", json=body)

    def set_effect(self, effect: int, brightness: Optional[int] = None) -> dict[str, Any]:
        body: dict[str, Any] = {"effect": effect}
        if brightness is not None:
            body["brightness"] = brightness
        return self._request("POST", "/effect", json=body)

    def save(self) -> dict[str, Any]:
        return self._request("POST", "/save")

    def reset(self) -> dict[str, Any]:
        return self._request("POST", "/reset")

    def reconnect(self) -> dict[str, Any]:
        return self._request("POST", "/reconnect")

    def request_device_status(self) -> dict[str, Any]:
        """Ask the device to print its settings (the reply only shows in the gateway log)."""
        return self._request("GET", "/arduino-status")

    def effects(self) -> list[dict[str, Any]]:
        return self._request("GET", "/effects")


class StatusPoller:
    """
    Poll the gateway's /status on a fixed period from a background thread.

    Any failed poll reports the bridge as disconnected. Polling never
    changes anything on the gateway side.
    """

    def __init__(
        self,
        client: BridgeClient,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_change: Optional[Callable[[bool], None]] = None,
    ):
        self._client = client
        self._interval = interval
        self._on_change = on_change
        self._connected = False
        self._last_status: Optional[dict[str, Any]] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(
        cls,
        client: BridgeClient,
        config: AppConfig,
        on_change: Optional[Callable[[bool], None]] = None,
    ) -> "StatusPoller":
        """Poller using the configured `status_poll_interval`."""
        return cls(client, interval=config.status_poll_interval, on_change=on_change)

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def last_status(self) -> Optional[dict[str, Any]]:
        """Body of the last successful poll."""
        return self._last_status

    def poll_once(self) -> bool:
        """Poll immediately and return the resulting connected flag."""
        try:
            status = self._client.status()
        except GatewayRequestError as e:
            logger.debug(f"Status poll failed: {e.technical_message}")
            connected = False
        else:
            self._last_status = status
            connected = bool(status.get("connected", False))

        if connected != self._connected:
            self._connected = connected
            logger.info(f"Bridge {'connected' if connected else 'disconnected'}")
            if self._on_change:
                try:
                    self._on_change(connected)
                except Exception as e:
                    logger.error(f"Error in status change callback: {e}")

        return connected

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            logger.warning("StatusPoller is already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="ledbridge-status-poller", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=self._interval + 1.0)
        self._thread = None

    def _run(self) -> None:
        self.poll_once()
        while not self._stop_event.wait(self._interval):
            self.poll_once()
