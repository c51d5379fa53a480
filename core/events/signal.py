from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Signal(Generic[T]):
    """
    Framework-agnostic signal/slot primitive.

    Subscribers are called synchronously in connection order. A subscriber
    that is a dead weak proxy (ReferenceError) is dropped; any other error
    propagates to the emitter.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._subscribers: list[Callable[[T], None]] = []
        self._lock: RLock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def connect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def disconnect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def disconnect_all(self) -> None:
        with self._lock:
            self._subscribers.clear()

    def emit(self, payload: T) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(payload)
            except ReferenceError:
                logger.debug("Dropping dead subscriber from signal %s", self.name or "<anonymous>")
                self.disconnect(callback)
