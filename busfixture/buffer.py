"""Append-only buffer of observed events of one kind."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from typing import Any


class EventBuffer:
    """Ordered, append-only record of events observed from one source.

    Insertion order is observation order. Snapshots only include events
    appended before the call.
    """

    def __init__(self, kind: str) -> None:
        """Initializes buffer."""
        self._kind = kind
        self._events: list[Any] = []
        self._lock = threading.Lock()

    @property
    def kind(self) -> str:
        """Returns kind of events held in this buffer."""
        return self._kind

    def append(self, event: Any) -> None:
        """Appends event."""
        with self._lock:
            self._events.append(event)

    def append_and_test(
        self, event: Any, predicate: Callable[[Any], bool] | None = None
    ) -> bool:
        """Appends event, then returns if it satisfies predicate.

        Errors raised by predicate propagate after the event is stored.
        """
        self.append(event)
        if predicate is None:
            return False
        return bool(predicate(event))

    def snapshot(self) -> tuple[Any, ...]:
        """Returns a read-only copy of the events appended so far."""
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind='{self._kind}', events={len(self)})"
