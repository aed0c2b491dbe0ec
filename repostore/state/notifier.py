"""Payload-less broadcast of repository state changes."""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ChangeNotifier:
    """Tells subscribers that repository state may have changed.

    Listeners get no delta and are expected to re-read what they need.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self) -> None:
        """Call every listener synchronously."""
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.warning(f"Update listener {listener!r} failed: {e}")

    def __len__(self) -> int:
        return len(self._listeners)
