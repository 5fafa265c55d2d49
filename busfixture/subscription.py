"""Binding between an event source and the buffer recording its events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .error import PredicateFault

if TYPE_CHECKING:
    from .buffer import EventBuffer
    from .context import Event
    from .dispatcher import Dispatcher, Signal

_LOGGER = logging.getLogger(__name__)


class StreamSubscription:
    """Records every event from one source and reports predicate matches.

    Only events tagged with the awaited kind are tested against the predicate.
    """

    def __init__(
        self,
        kind: str,
        buffer: EventBuffer,
        awaited_kind: str,
        predicate: Callable[[Any], bool],
        on_match: Callable[[], None],
        on_fault: Callable[[PredicateFault], None] | None = None,
    ) -> None:
        """Initializes subscription. Call attach() or use open()."""
        self._kind = kind
        self._buffer = buffer
        self._awaited_kind = awaited_kind
        self._predicate = predicate
        self._on_match = on_match
        self._on_fault = on_fault
        self._signal: Signal | None = None
        self._closed = False

    @classmethod
    def open(
        cls,
        source: Dispatcher,
        kind: str,
        buffer: EventBuffer,
        awaited_kind: str,
        predicate: Callable[[Any], bool],
        on_match: Callable[[], None],
        on_fault: Callable[[PredicateFault], None] | None = None,
    ) -> StreamSubscription:
        """Returns a subscription already receiving events from source."""
        subscription = cls(kind, buffer, awaited_kind, predicate, on_match, on_fault)
        subscription.attach(source)
        return subscription

    @property
    def kind(self) -> str:
        """Returns kind of the monitored source."""
        return self._kind

    @property
    def buffer(self) -> EventBuffer:
        """Returns buffer events are recorded into."""
        return self._buffer

    @property
    def is_open(self) -> bool:
        """Returns if events are still being delivered."""
        return self._signal is not None and not self._closed

    def attach(self, source: Dispatcher) -> None:
        """Starts receiving events from source."""
        if self._closed or self._signal is not None:
            return
        self._signal = source.connect(self._deliver)
        _LOGGER.debug("Subscribed to %s", self._kind)

    def close(self) -> None:
        """Stops delivery. Events already recorded are kept."""
        if self._closed:
            return
        self._closed = True
        if self._signal:
            self._signal.disconnect()
            self._signal = None
        _LOGGER.debug(
            "Unsubscribed from %s after %s event%s",
            self._kind,
            len(self._buffer),
            "" if len(self._buffer) == 1 else "s",
        )

    def _deliver(self, event: Event) -> None:
        """Receives one event from the source."""
        if self._closed:
            return

        predicate = self._predicate if event.kind == self._awaited_kind else None

        try:
            matched = self._buffer.append_and_test(event.payload, predicate)
        except Exception as err:  # pylint: disable=broad-except
            fault = PredicateFault(event.kind, event.payload, err)
            _LOGGER.error("%s", fault)
            if self._on_fault is None:
                raise fault from err
            fault.__cause__ = err
            self._on_fault(fault)
            return

        if matched:
            _LOGGER.debug("Matched %s event %s", event.kind, event.payload)
            self._on_match()
