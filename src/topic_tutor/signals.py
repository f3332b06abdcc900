"""Synchronous publish/subscribe used to push state changes to views."""
from typing import Callable


class Signal:
    """An ordered set of callbacks invoked synchronously on emit.

    Subscribers run in subscription order on the caller's thread. Emitters
    call emit() only after their state is fully updated, so a subscriber
    never observes a half-applied change.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._subscribers: list[Callable] = []

    def subscribe(self, callback: Callable) -> Callable[[], None]:
        """Register callback and return a function that unsubscribes it."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callable) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, *args) -> None:
        # Copy so a subscriber may unsubscribe itself while being notified.
        for callback in list(self._subscribers):
            callback(*args)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, subscribers={len(self._subscribers)})"
