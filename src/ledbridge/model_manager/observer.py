"""Observer list used by the connection manager.

Registration swaps in a new tuple under a lock; notification iterates the
tuple it found without locking, so callbacks run lock-free and may register
or unregister observers themselves.
"""

import logging
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)


class ObserverManager[T: object]:
    """
    Copy-on-write list of observers.

    Observers are notified by callback name. An observer that lacks the
    callback is skipped, and one whose callback raises is logged without
    affecting the others or the notifying thread.

    Example:
        ```python
        observers = ObserverManager[ConnectionObserver](observer_type_name="connection")
        observers.register(printer)
        observers.notify("on_status_line", line)
        ```
    """

    def __init__(self, observer_type_name: str = "observer"):
        self._observers: tuple[T, ...] = ()
        self._lock = Lock()
        self._name = observer_type_name

    def register(self, observer: T) -> None:
        """Add an observer; registering twice has no effect."""
        with self._lock:
            if observer in self._observers:
                return
            self._observers = self._observers + (observer,)
        logger.debug(f"Registered {self._name} observer {observer!r}")

    def unregister(self, observer: T) -> None:
        """Remove an observer; unknown observers are ignored."""
        with self._lock:
            if observer not in self._observers:
                logger.debug(f"Ignoring unregister of unknown {self._name} observer {observer!r}")
                return
            self._observers = tuple(o for o in self._observers if o is not observer)
        logger.debug(f"Unregistered {self._name} observer {observer!r}")

    def notify(self, callback_name: str, *args: Any) -> None:
        """Call `callback_name(*args)` on every observer that defines it."""
        for observer in self._observers:
            callback = getattr(observer, callback_name, None)
            if callback is None:
                continue
            try:
                callback(*args)
            except Exception:
                logger.exception(f"{self._name} observer {observer!r} failed in {callback_name}")

    def count(self) -> int:
        return len(self._observers)

    def __contains__(self, observer: object) -> bool:
        return observer in self._observers
