"""
Shared state container for the domain stores.

A store owns a list of records plus `loading` / `error` flags. Views register
a callback with subscribe() and are called after every state change; there is
no implicit reactivity.
"""

from __future__ import annotations

from typing import Any, Callable

from land_registry.utils.logger import get_logger

logger = get_logger("stores")

Listener = Callable[["Store"], None]


class Store:
    name = "store"

    def __init__(self) -> None:
        self.loading = False
        self.error: str | None = None
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                # A broken view must not break the store operation.
                logger.exception("%s listener failed: %s", self.name, e)

    def _begin(self) -> None:
        self.loading = True
        self.error = None
        self._notify()

    def _finish(self) -> None:
        self.loading = False
        self._notify()

    def _fail(self, message: str) -> dict[str, Any]:
        self.error = message
        logger.warning("%s: %s", self.name, message)
        return {"success": False, "error": message}

    def _raised(self, exc: Exception) -> dict[str, Any]:
        logger.exception("%s call raised: %s", self.name, exc)
        return self._fail(str(exc) or type(exc).__name__)

    def clear_error(self) -> None:
        self.error = None
        self._notify()
