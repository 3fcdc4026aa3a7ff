"""Protocol definitions for domain-specific observers.

For the generic observer list used to dispatch these callbacks, see
ledbridge.model_manager.observer.
"""

from .observers import ConnectionObserver

__all__ = ["ConnectionObserver"]
