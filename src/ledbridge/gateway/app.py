"""HTTP command gateway.

Translates JSON requests into codec calls and connection manager writes.
Endpoints are plain `def` functions, so FastAPI runs each request in its
threadpool; concurrent requests meet at the manager's write lock.

Error shapes:
    400 {"error": ...}   invalid parameter or malformed JSON body (nothing is sent)
    500 {"error": ...}   device not connected or serial write failed
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledbridge import __version__
from ledbridge.device import SerialConnectionManager, TransportOpener
from ledbridge.exceptions import InvalidParameterError, LedBridgeError, TransportUnavailableError
from ledbridge.models import AppConfig, EffectId, QueryStatus, Reset, Save
from ledbridge.protocol import (
    EFFECT_DESCRIPTIONS,
    EFFECT_NAMES,
    build_color_command,
    build_effect_command,
    effect_name,
)

logger = logging.getLogger(__name__)

JsonBody = Optional[dict[str, Any]]


def create_app(manager: SerialConnectionManager, config: Optional[AppConfig] = None) -> FastAPI:
    """
    Build the gateway application around an existing connection manager.

    The app connects the manager on startup (a failure is logged and the
    gateway keeps serving, reporting connected=false) and disconnects it on
    shutdown.

    Args:
        manager: The connection manager shared by every request
        config: Route prefix and CORS settings (defaults if None)
    """
    config = config or AppConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await asyncio.to_thread(manager.connect)
        except TransportUnavailableError as e:
            logger.error(f"Arduino not connected at startup: {e.technical_message}")
            if e.recovery_hint:
                logger.info(e.recovery_hint)
        yield
        logger.info("Shutting down gateway")
        await asyncio.to_thread(manager.disconnect)

    app = FastAPI(
        title="ledbridge",
        description="HTTP bridge to an Arduino LED strip controller",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.manager = manager
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(_build_router(manager, config.api_prefix))
    return app


def build_app(config: AppConfig, opener: Optional[TransportOpener] = None) -> FastAPI:
    """Create a connection manager from config and wrap it in a gateway app."""
    manager = SerialConnectionManager.from_config(config, opener=opener)
    return create_app(manager, config)


def _build_router(manager: SerialConnectionManager, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix)

    @router.get("/status")
    def get_status() -> dict[str, Any]:
        return {
            "connected": manager.is_connected(),
            "port": manager.port,
            "state": manager.state.value,
        }

    @router.post("/color")
    def set_color(payload: JsonBody = Body(default=None)) -> dict[str, Any]:
        payload = payload or {}
        command = build_color_command(
            payload.get("r"), payload.get("g"), payload.get("b"), payload.get("brightness")
        )
        line = manager.send_command(command)
        return {
            "success": True,
            "command": line,
            "color": {
                "r": command.r,
                "g": command.g,
                "b": command.b,
                "brightness": command.brightness,
            },
        }

    @router.post("/effect")
    def set_effect(payload: JsonBody = Body(default=None)) -> dict[str, Any]:
        payload = payload or {}
        command = build_effect_command(payload.get("effect"), payload.get("brightness"))
        line = manager.send_command(command)
        return {
            "success": True,
            "command": line,
            "effect": command.effect,
            "effectName": effect_name(command.effect),
            "brightness": command.brightness,
        }

    @router.post("/save")
    def save() -> dict[str, Any]:
        manager.send_command(Save())
        return {"success": True, "message": "Configurações salvas"}

    @router.post("/reset")
    def reset() -> dict[str, Any]:
        manager.send_command(Reset())
        return {"success": True, "message": "Configurações resetadas"}

    @router.get("/arduino-status")
    def request_device_status() -> dict[str, Any]:
        # The reply arrives asynchronously on the reader thread and is only logged
        manager.send_command(QueryStatus())
        return {"success": True, "message": "Status solicitado"}

    @router.post("/reconnect")
    def reconnect(background_tasks: BackgroundTasks) -> dict[str, Any]:
        background_tasks.add_task(manager.reconnect)
        return {"success": True, "message": "Tentando reconectar..."}

    @router.get("/effects")
    def list_effects() -> list[dict[str, Any]]:
        return [
            {"id": int(effect), "name": EFFECT_NAMES[effect], "description": EFFECT_DESCRIPTIONS[effect]}
            for effect in EffectId
        ]

    @router.post("/command")
    def dispatch_command(
        background_tasks: BackgroundTasks, payload: JsonBody = Body(default=None)
    ) -> dict[str, Any]:
        """Single entry point taking {"action": ..., **params}, as used by the web UI proxy."""
        payload = payload or {}
        action = payload.get("action")

        if not payload.get("brightness"):
            # Proxy semantics: a missing or falsy brightness (0, "", null) means full brightness
            payload = {**payload, "brightness": None}

        if action == "color":
            return set_color(payload)
        if action == "effect":
            return set_effect(payload)
        if action == "save":
            return save()
        if action == "reset":
            return reset()
        if action == "status":
            return request_device_status()
        if action == "reconnect":
            return reconnect(background_tasks)

        raise InvalidParameterError("action", action, "Invalid action")

    return router


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedBridgeError)
    async def ledbridge_error(request: Request, exc: LedBridgeError) -> JSONResponse:
        log = logger.warning if exc.http_status < 500 else logger.error
        log(f"{request.method} {request.url.path} -> {exc.http_status}: {exc.technical_message}")
        return JSONResponse(status_code=exc.http_status, content={"error": exc.user_message})

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"Malformed body for {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Corpo da requisição inválido"})
