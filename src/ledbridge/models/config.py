"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from ledbridge.model_manager.persistence import JsonModelFile

CONFIG_DIR = Path.home() / ".ledbridge"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.json"


class AppConfig(BaseModel):
    """Bridge configuration and settings."""

    # Serial link
    serial_port: str = Field(
        default="/dev/ttyUSB0",
        description="Serial device path of the Arduino (e.g. /dev/ttyUSB0, /dev/ttyACM0, COM3)",
    )
    read_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Serial read timeout (seconds); bounds how fast the reader notices a disconnect",
    )
    reconnect_delay: float = Field(
        default=1.0,
        ge=0,
        description="Settle delay between closing and reopening the port on reconnect (seconds)",
    )

    # HTTP gateway
    http_host: str = Field(default="0.0.0.0", description="Bind address of the HTTP gateway")
    http_port: int = Field(default=3001, ge=1, le=65535, description="TCP port of the HTTP gateway")
    api_prefix: str = Field(default="/api", description="Path prefix for all API routes")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    # Clients
    status_poll_interval: float = Field(
        default=5.0, gt=0, description="How often clients poll /status (seconds)"
    )

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Ensure the prefix is empty or starts with '/' and has no trailing '/'."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.ledbridge/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return JsonModelFile(path or DEFAULT_CONFIG_PATH, cls).load_or_default()

    def save(self, path: Path | None = None) -> None:
        """Save config to file, keeping a .bak of the previous one."""
        JsonModelFile(path or DEFAULT_CONFIG_PATH, AppConfig).save(self)
