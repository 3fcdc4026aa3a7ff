"""CLI commands for ledbridge."""

from .config import config, load_config
from .ports import ports
from .send import send_group

__all__ = ["config", "load_config", "ports", "send_group"]
