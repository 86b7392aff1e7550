"""Current-value observables with explicit, cancellable subscriptions."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle returned by every subscribe call; ``cancel()`` detaches it."""

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None) -> None:
        self._on_cancel = on_cancel
        self._active = True
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        """Whether the subscription still delivers."""
        return self._active

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""
        with self._lock:
            if not self._active:
                return
            self._active = False
            on_cancel, self._on_cancel = self._on_cancel, None
        if on_cancel is not None:
            on_cancel()


class Observable(Generic[T]):
    """A value plus change notification.

    Listeners run in registration order on the thread that calls ``set``.
    A listener that raises is logged and the remaining listeners still run.
    """

    def __init__(self, initial: T, name: str = "observable") -> None:
        self._value = initial
        self._name = name
        self._listeners: list[tuple[object, Subscription, Callable[[T], None]]] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        """The most recently published value."""
        return self._value

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def set(self, value: T) -> None:
        """Publish *value* to every active listener."""
        with self._lock:
            self._value = value
            listeners = list(self._listeners)
        for _, sub, callback in listeners:
            if sub.active:
                self._notify(callback, value)

    def subscribe(
        self, callback: Callable[[T], None], *, emit_current: bool = True
    ) -> Subscription:
        """Register *callback* and return its cancellation handle.

        The callback receives the current value straight away unless
        ``emit_current`` is False.
        """
        token = object()
        sub = Subscription(lambda: self._remove(token))
        with self._lock:
            self._listeners.append((token, sub, callback))
            current = self._value
        if emit_current:
            self._notify(callback, current)
        return sub

    def _remove(self, token: object) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry[0] is not token]

    def _notify(self, callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("Listener on %s raised", self._name)
