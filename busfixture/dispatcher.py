"""Classes for dispatching events"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

_LOGGER = logging.getLogger(__name__)


class Signal:
    """Container for a target function that receives events from a dispatcher."""

    def __init__(self, dispatcher: Dispatcher, target: Callable):
        """Initialize signal."""
        self.dispatcher = dispatcher
        self.target = target

    def disconnect(self) -> None:
        """Removes signal from the dispatcher."""
        self.dispatcher.disconnect(self)


class Dispatcher:
    """Named event source that delivers each event to its connected signals.

    Plain callables are invoked inline, in the order they were connected, so an
    event is fully delivered by the time send() returns. Coroutine functions are
    scheduled as tasks on the loop they were connected from, which allows send()
    to be called from other threads. A target raising does not stop delivery to
    the targets after it.
    """

    def __init__(self, name: str = ""):
        """Initialize dispatcher."""
        self._name = name
        self._signals: list[Signal] = []
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def name(self) -> str:
        """Return name of the event source."""
        return self._name

    @property
    def signals(self) -> list[Signal]:
        """Return connected signals."""
        return list(self._signals)

    def connect(self, target: Callable) -> Signal:
        """Return a new signal that runs the target function."""
        if self._is_coroutine_target(target):
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                # Bound on first send from a running loop instead
                pass
        signal = Signal(self, target)
        self._signals.append(signal)
        return signal

    def send(self, *args: Any) -> None:
        """Call each connected signal's target function with args."""
        # Copy so targets may disconnect while being dispatched to
        signals = list(self._signals)
        for signal in signals:
            try:
                self._call_target(signal.target, *args)
            except Exception as err:  # pylint: disable=broad-except
                _LOGGER.exception(
                    "Unhandled exception in %s listener %s('%s')",
                    self._name or "signal",
                    type(err).__name__,
                    err,
                )
        if len(signals) > 0:
            _LOGGER.debug(
                "Dispatched %s to %s listener%s with %s",
                self._name or "signal",
                len(signals),
                "s" if len(signals) > 1 else "",
                args,
            )

    def disconnect(self, signal: Signal) -> None:
        """Removes signal."""
        try:
            self._signals.remove(signal)
        except ValueError:
            pass

    def disconnect_all(self) -> None:
        """Disconnect all signals."""
        self._signals.clear()

    @staticmethod
    def _is_coroutine_target(target: Callable) -> bool:
        check_target = target
        while isinstance(check_target, functools.partial):
            check_target = check_target.func
        return inspect.iscoroutinefunction(check_target)

    def _call_target(self, target: Callable, *args) -> None:
        if not self._is_coroutine_target(target):
            target(*args)
            return

        try:
            running_loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            running_loop = None

        if running_loop is not None:
            self._loop = running_loop
            task = running_loop.create_task(target(*args))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        elif self._loop is not None and not self._loop.is_closed():
            asyncio.run_coroutine_threadsafe(target(*args), self._loop)
        else:
            raise RuntimeError("No event loop to schedule coroutine listener on")
