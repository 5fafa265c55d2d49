"""Scoped set of event sources observed by a fixture."""

from __future__ import annotations

import logging
from typing import Any

from . import const
from .context import (
    Event,
    IncomingLogicalMessageContext,
    InvokeHandlerContext,
    OutgoingLogicalMessageContext,
)
from .dispatcher import Dispatcher
from .error import BusFixtureError

_LOGGER = logging.getLogger(__name__)


class Telemetry:
    """Holds one named event source per monitored kind.

    Endpoints under test emit through an instance of this class, and fixtures
    subscribe to the same instance. Nothing is shared between instances.
    """

    def __init__(self, kinds: tuple[str, ...] = const.MONITORED_KINDS) -> None:
        """Initializes an event source for each kind."""
        self._sources: dict[str, Dispatcher] = {kind: Dispatcher(kind) for kind in kinds}

    @property
    def kinds(self) -> tuple[str, ...]:
        """Returns kinds of the available sources."""
        return tuple(self._sources)

    def source(self, kind: str) -> Dispatcher:
        """Returns the event source for kind."""
        try:
            return self._sources[kind]
        except KeyError as err:
            raise BusFixtureError(f"Unknown event kind '{kind}'") from err

    def emit(self, kind: str, payload: Any) -> None:
        """Sends payload to subscribers of kind."""
        self.source(kind).send(Event(kind, payload))

    def incoming(self, context: IncomingLogicalMessageContext) -> None:
        """Emits a received message."""
        self.emit(const.KIND_INCOMING_MESSAGE, context)

    def outgoing(self, context: OutgoingLogicalMessageContext) -> None:
        """Emits a sent message."""
        self.emit(const.KIND_OUTGOING_MESSAGE, context)

    def invoked_handler(self, context: InvokeHandlerContext) -> None:
        """Emits a handler invocation."""
        self.emit(const.KIND_INVOKED_HANDLER, context)

    def close(self) -> None:
        """Disconnects all subscribers."""
        for source in self._sources.values():
            source.disconnect_all()
        _LOGGER.debug("Closed telemetry sources %s", ", ".join(self._sources))
