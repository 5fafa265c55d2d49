"""One-shot signal marking that the awaited event occurred."""

from __future__ import annotations

import asyncio
import logging
import threading

_LOGGER = logging.getLogger(__name__)


class CompletionGate:
    """Resolves at most once. Later resolve() or fail() calls are ignored.

    May be settled from any thread; waiters are woken on the gate's loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initializes gate bound to loop, or the running loop."""
        self._loop = loop if loop is not None else asyncio.get_running_loop()
        self._future: asyncio.Future[None] = self._loop.create_future()
        self._lock = threading.Lock()
        self._settled = False
        self._fault: BaseException | None = None

    @property
    def is_settled(self) -> bool:
        """Returns if the gate was resolved or failed."""
        return self._settled

    @property
    def is_resolved(self) -> bool:
        """Returns if the gate was resolved successfully."""
        return self._settled and self._fault is None

    @property
    def fault(self) -> BaseException | None:
        """Returns error the gate failed with."""
        return self._fault

    def resolve(self) -> None:
        """Marks the awaited event as observed."""
        self._settle(None)

    def fail(self, err: BaseException) -> None:
        """Settles the gate with an error raised to waiters."""
        self._settle(err)

    async def wait(self) -> None:
        """Waits until the gate is settled. Raises the fault if it failed."""
        # Shield so a waiter timing out does not cancel the gate itself
        await asyncio.shield(self._future)

    def _settle(self, err: BaseException | None) -> None:
        with self._lock:
            if self._settled:
                _LOGGER.debug("Gate already settled, ignoring")
                return
            self._settled = True
            self._fault = err

        if self._in_loop_thread():
            self._apply(err)
        else:
            self._loop.call_soon_threadsafe(self._apply, err)

    def _apply(self, err: BaseException | None) -> None:
        if self._future.done():
            return
        if err is None:
            self._future.set_result(None)
        else:
            self._future.set_exception(err)

    def _in_loop_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False
