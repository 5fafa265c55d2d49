"""Custom errors."""
from __future__ import annotations

import asyncio
from typing import Any

DEFAULT_MESSAGES = {
    asyncio.TimeoutError: "Timed out",
    AssertionError: "Assertion failed",
}


def format_error(err: BaseException) -> str:
    """Formats error message based on a base error."""
    msg: str | None = str(err)
    if msg == "":
        msg = DEFAULT_MESSAGES.get(type(err), type(err).__name__)
    return msg if msg else ""


class BusFixtureError(Exception):
    """Busfixture errors."""


class TimeoutExceeded(BusFixtureError, TimeoutError):
    """The awaited event was not observed before the deadline."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"No matching event observed within {timeout:g}s")


class PredicateFault(BusFixtureError, RuntimeError):
    """The match predicate raised while evaluating an event."""

    def __init__(self, kind: str, event: Any, err: BaseException):
        self.kind = kind
        self.event = event
        self.error = err
        self.action_error: BaseException | None = None
        super().__init__(
            f"Predicate failed on {kind} event {event!r} "
            f"with {type(err).__name__}('{format_error(err)}')"
        )
