"""Reusable infrastructure: observer lists and JSON model persistence."""

from .observer import ObserverManager
from .persistence import JsonModelFile

__all__ = ["ObserverManager", "JsonModelFile"]
