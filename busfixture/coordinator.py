"""Coordinator running an action and waiting for a matching event."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from . import const
from .buffer import EventBuffer
from .error import BusFixtureError, PredicateFault, TimeoutExceeded, format_error
from .gate import CompletionGate
from .subscription import StreamSubscription

if TYPE_CHECKING:
    from .context import (
        IncomingLogicalMessageContext,
        InvokeHandlerContext,
        OutgoingLogicalMessageContext,
    )
    from .telemetry import Telemetry

_LOGGER = logging.getLogger(__name__)


def resolve_timeout(
    timeout: float | None,
    default: float = const.DEFAULT_TIMEOUT,
    no_deadline: bool = False,
) -> float | None:
    """Returns the deadline in seconds to apply, or None to wait indefinitely.

    No-deadline mode wins over an explicit timeout, which wins over the default.
    """
    if no_deadline:
        return None
    if timeout is None:
        timeout = default
    if timeout < 0:
        raise ValueError(f"Timeout must not be negative, got {timeout}")
    return timeout


class WaitCoordinator:
    """Runs an action and waits until an event of the awaited kind matches.

    Moves through idle, armed, racing and drained states. A coordinator runs
    once; create a new one for each wait.
    """

    def __init__(
        self,
        telemetry: Telemetry,
        awaited_kind: str,
        predicate: Callable[[Any], bool],
        *,
        timeout: float | None = None,
        default_timeout: float = const.DEFAULT_TIMEOUT,
        no_deadline: bool = False,
    ) -> None:
        """Initializes coordinator."""
        if awaited_kind not in telemetry.kinds:
            raise BusFixtureError(f"Unknown event kind '{awaited_kind}'")

        self._telemetry = telemetry
        self._awaited_kind = awaited_kind
        self._predicate = predicate
        self._timeout = resolve_timeout(timeout, default_timeout, no_deadline)
        self._state: str = const.STATE_IDLE
        self._buffers: dict[str, EventBuffer] = {}

    @property
    def state(self) -> str:
        """Returns current state of the coordinator."""
        return self._state

    @property
    def timeout(self) -> float | None:
        """Returns deadline in seconds, None when waiting indefinitely."""
        return self._timeout

    @property
    def awaited_kind(self) -> str:
        """Returns kind of event the predicate is applied to."""
        return self._awaited_kind

    async def run(
        self, action: Callable[[], Awaitable[Any]]
    ) -> ObservedMessageContexts:
        """Runs action and returns every event observed once one matches.

        Raises TimeoutExceeded when the deadline elapses first, PredicateFault
        when the predicate raises, and any error raised by action itself.
        """
        if self._state != const.STATE_IDLE:
            raise BusFixtureError(f"Coordinator already used ({self._state})")

        gate = CompletionGate()
        subscriptions: list[StreamSubscription] = []
        started = time.monotonic()

        try:
            # Subscriptions must be live before the action can emit anything
            for kind in self._telemetry.kinds:
                buffer = EventBuffer(kind)
                self._buffers[kind] = buffer
                subscriptions.append(
                    StreamSubscription.open(
                        self._telemetry.source(kind),
                        kind,
                        buffer,
                        self._awaited_kind,
                        self._predicate,
                        gate.resolve,
                        gate.fail,
                    )
                )
            self._state = const.STATE_ARMED
            _LOGGER.debug(
                "Armed %s subscriptions, waiting for %s",
                len(subscriptions),
                self._awaited_kind,
            )

            await self._run_action(action, gate)

            self._state = const.STATE_RACING
            await self._race(gate)
        finally:
            for subscription in subscriptions:
                subscription.close()
            self._state = const.STATE_DRAINED

        _LOGGER.debug(
            "Observed %s after %.3fs", self._awaited_kind, time.monotonic() - started
        )
        return self._snapshot()

    async def _run_action(
        self, action: Callable[[], Awaitable[Any]], gate: CompletionGate
    ) -> None:
        """Awaits action, returning early only if the gate fails meanwhile."""
        action_task = asyncio.ensure_future(action())
        gate_task = asyncio.ensure_future(gate.wait())
        try:
            await asyncio.wait(
                {action_task, gate_task}, return_when=asyncio.FIRST_COMPLETED
            )
            if gate.fault is not None:
                self._attach_action_error(action_task, gate.fault)
                # Raises the predicate fault
                await gate_task
            await action_task
        finally:
            await _cancel(gate_task)
            await _cancel(action_task)

    @staticmethod
    def _attach_action_error(
        action_task: asyncio.Future, fault: BaseException
    ) -> None:
        """Records an error the action raised alongside the predicate fault."""
        if not action_task.done() or action_task.cancelled():
            return
        action_error = action_task.exception()
        if action_error is None:
            return
        _LOGGER.warning(
            "Action also failed with %s('%s')",
            type(action_error).__name__,
            format_error(action_error),
        )
        if isinstance(fault, PredicateFault):
            fault.action_error = action_error

    async def _race(self, gate: CompletionGate) -> None:
        """Waits for the gate, bounded by the deadline when one applies."""
        if self._timeout is None:
            await gate.wait()
            return

        try:
            await asyncio.wait_for(gate.wait(), self._timeout)
        except asyncio.TimeoutError as err:
            if gate.is_settled:
                # Settled as the deadline elapsed
                await gate.wait()
                return
            _LOGGER.warning(
                "Timed out after %ss waiting for %s", self._timeout, self._awaited_kind
            )
            raise TimeoutExceeded(self._timeout) from err

    def _snapshot(self) -> ObservedMessageContexts:
        return ObservedMessageContexts(
            incoming=self._events(const.KIND_INCOMING_MESSAGE),
            outgoing=self._events(const.KIND_OUTGOING_MESSAGE),
            invoked_handlers=self._events(const.KIND_INVOKED_HANDLER),
        )

    def _events(self, kind: str) -> tuple[Any, ...]:
        buffer = self._buffers.get(kind)
        return buffer.snapshot() if buffer is not None else ()


async def _cancel(task: asyncio.Future) -> None:
    """Cancels task and waits for it to finish."""
    if task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


@dataclass(frozen=True)
class ObservedMessageContexts:
    """Every event observed during one wait, by kind, in observation order."""

    incoming: tuple[IncomingLogicalMessageContext, ...] = ()
    outgoing: tuple[OutgoingLogicalMessageContext, ...] = ()
    invoked_handlers: tuple[InvokeHandlerContext, ...] = ()

    def received(self, message_type: type) -> list[Any]:
        """Returns instances of received messages of message_type."""
        return [
            c.message.instance
            for c in self.incoming
            if c.message.message_type is message_type
        ]

    def sent(self, message_type: type) -> list[Any]:
        """Returns instances of sent messages of message_type."""
        return [
            c.message.instance
            for c in self.outgoing
            if c.message.message_type is message_type
        ]

    def handled_by(self, handler_type: type) -> list[InvokeHandlerContext]:
        """Returns invocations of handler_type."""
        return [c for c in self.invoked_handlers if c.handler_type is handler_type]
