"""Tests for the gateway HTTP client and status poller."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from fakes import wait_until
from ledbridge.client import BridgeClient, StatusPoller
from ledbridge.exceptions import GatewayRequestError
from ledbridge.gateway import create_app
from ledbridge.models import AppConfig


def make_client(handler) -> BridgeClient:
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://bridge")
    return BridgeClient(http_client=http)


@pytest.mark.unit
class TestBridgeClient:
    """Test BridgeClient requests against a mock transport."""

    def test_set_color_body(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"success": True, "command": "<1, 2, 3, 4>"})

        result = make_client(handler).set_color(1, 2, 3, brightness=4)

        assert result["command"] == "<1, 2, 3, 4>"
        assert seen == [("POST", "/api/color", {"r": 1, "g": 2, "b": 3, "brightness": 4})]

    def test_brightness_omitted_when_none(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True})

        make_client(handler).set_effect(2)

        assert bodies == [{"effect": 2}]

    def test_error_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "Efeito deve estar entre 0 e 3"})

        with pytest.raises(GatewayRequestError) as exc_info:
            make_client(handler).set_effect(4)

        assert exc_info.value.status_code == 400
        assert exc_info.value.user_message == "Efeito deve estar entre 0 e 3"

    def test_non_json_error_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(GatewayRequestError) as exc_info:
            make_client(handler).save()

        assert exc_info.value.status_code == 502

    def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GatewayRequestError) as exc_info:
            make_client(handler).status()

        assert exc_info.value.status_code is None
        assert exc_info.value.recovery_hint is not None

    def test_from_config(self):
        config = AppConfig(http_host="0.0.0.0", http_port=8080, api_prefix="v1")

        with BridgeClient.from_config(config) as client:
            assert client._http.base_url.host == "localhost"
            assert client._http.base_url.port == 8080
            assert client._prefix == "/v1"

    def test_from_config_keeps_explicit_host(self):
        with BridgeClient.from_config(AppConfig(http_host="192.168.1.20")) as client:
            assert client._http.base_url.host == "192.168.1.20"

    def test_custom_prefix(self):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"success": True})

        http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://bridge")
        BridgeClient(api_prefix="/v1/", http_client=http).reset()

        assert paths == ["/v1/reset"]


@pytest.mark.integration
class TestBridgeClientAgainstGateway:
    """Test the client end to end against the real app."""

    def test_round_trip(self, manager, opener):
        app = create_app(manager, AppConfig(serial_port="/dev/fake"))

        with TestClient(app) as http:
            client = BridgeClient(http_client=http)

            assert client.status()["connected"] is True
            client.set_color(255, 0, 0)
            client.set_effect(3, brightness=50)
            client.save()
            client.request_device_status()
            assert len(client.effects()) == 4

            with pytest.raises(GatewayRequestError) as exc_info:
                client.set_color(0, 0, 999)

        assert exc_info.value.user_message == "Valores RGB devem estar entre 0 e 255"
        assert opener.latest.writes == [
            b"<255, 0, 0, 255>\n",
            b"<effect=3, 50>\n",
            b"<save>\n",
            b"<status>\n",
        ]


@pytest.mark.unit
class TestStatusPoller:
    """Test polling connection status."""

    def test_poll_once_tracks_changes(self):
        responses = [
            httpx.Response(200, json={"connected": True, "port": "COM3", "state": "open"}),
            httpx.Response(500, json={"error": "Failed to connect to Arduino server"}),
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        changes = []
        poller = StatusPoller(make_client(handler), on_change=changes.append)

        assert poller.poll_once() is True
        assert poller.last_status["port"] == "COM3"
        assert poller.poll_once() is False
        assert changes == [True, False]
        # Last good status is kept for display
        assert poller.last_status["port"] == "COM3"

    def test_network_failure_reports_disconnected(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        poller = StatusPoller(make_client(handler))

        assert poller.poll_once() is False
        assert poller.connected is False

    def test_default_interval(self):
        poller = StatusPoller(make_client(lambda request: httpx.Response(200, json={})))

        assert poller._interval == 5.0

    def test_interval_from_config(self):
        client = make_client(lambda request: httpx.Response(200, json={"connected": True}))
        changes = []

        poller = StatusPoller.from_config(client, AppConfig(status_poll_interval=2.5), changes.append)

        assert poller._interval == 2.5
        assert poller.poll_once() is True
        assert changes == [True]

    @pytest.mark.integration
    def test_background_polling(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(200, json={"connected": True})

        poller = StatusPoller(make_client(handler), interval=0.01)
        poller.start()
        try:
            assert wait_until(lambda: len(calls) >= 3)
            assert poller.connected
        finally:
            poller.stop()

        assert poller._thread is None
        assert all(path == "/api/status" for path in calls)
