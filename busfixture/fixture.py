"""Entry points for waiting on endpoint telemetry in integration tests."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from . import const
from .context import (
    IncomingLogicalMessageContext,
    InvokeHandlerContext,
    OutgoingLogicalMessageContext,
)
from .coordinator import ObservedMessageContexts, WaitCoordinator
from .debugger import debugger_attached
from .telemetry import Telemetry

_LOGGER = logging.getLogger(__name__)

Action = Callable[[], Awaitable[Any]]


class EndpointFixture:
    """Runs test actions against endpoints and waits for their telemetry.

    When no_deadline is None it is enabled if a debugger is attached, so that
    stepping through a test does not trip the timeout.
    """

    def __init__(
        self,
        telemetry: Telemetry,
        *,
        default_timeout: float = const.DEFAULT_TIMEOUT,
        no_deadline: bool | None = None,
    ) -> None:
        """Initializes the fixture."""
        self._telemetry = telemetry
        self._default_timeout = default_timeout
        self._no_deadline = debugger_attached() if no_deadline is None else no_deadline
        if self._no_deadline:
            _LOGGER.info("Waits will not time out")

    @property
    def telemetry(self) -> Telemetry:
        """Returns telemetry instance."""
        return self._telemetry

    @property
    def default_timeout(self) -> float:
        """Returns timeout used when a wait does not specify one."""
        return self._default_timeout

    @property
    def no_deadline(self) -> bool:
        """Returns if waits run without a deadline."""
        return self._no_deadline

    async def execute_and_wait_for_handled(
        self, action: Action, message_type: type, timeout: float | None = None
    ) -> ObservedMessageContexts:
        """Runs action and waits until a message of message_type is received."""

        def predicate(context: IncomingLogicalMessageContext) -> bool:
            return context.message.message_type is message_type

        return await self.wait(
            action, const.KIND_INCOMING_MESSAGE, predicate, timeout
        )

    async def execute_and_wait_for_sent(
        self, action: Action, message_type: type, timeout: float | None = None
    ) -> ObservedMessageContexts:
        """Runs action and waits until a message of message_type is sent."""

        def predicate(context: OutgoingLogicalMessageContext) -> bool:
            return context.message.message_type is message_type

        return await self.wait(
            action, const.KIND_OUTGOING_MESSAGE, predicate, timeout
        )

    async def execute_and_wait_for_saga_completion(
        self, action: Action, saga_type: type, timeout: float | None = None
    ) -> ObservedMessageContexts:
        """Runs action and waits until a handler of saga_type completes its saga.

        The invocation must carry a saga instance that was found and marked
        completed.
        """

        def predicate(context: InvokeHandlerContext) -> bool:
            if context.handler_type is not saga_type:
                return False
            return context.saga is not None and context.saga.completed

        return await self.wait(
            action, const.KIND_INVOKED_HANDLER, predicate, timeout
        )

    async def execute_and_wait(
        self,
        action: Action,
        *,
        incoming: Callable[[IncomingLogicalMessageContext], bool] | None = None,
        outgoing: Callable[[OutgoingLogicalMessageContext], bool] | None = None,
        handler: Callable[[InvokeHandlerContext], bool] | None = None,
        timeout: float | None = None,
    ) -> ObservedMessageContexts:
        """Runs action and waits for an event matching the given predicate.

        Exactly one of incoming, outgoing or handler must be given.
        """
        predicates = [
            (kind, predicate)
            for kind, predicate in (
                (const.KIND_INCOMING_MESSAGE, incoming),
                (const.KIND_OUTGOING_MESSAGE, outgoing),
                (const.KIND_INVOKED_HANDLER, handler),
            )
            if predicate is not None
        ]
        if len(predicates) != 1:
            raise ValueError(
                "Exactly one of incoming, outgoing or handler predicates is required"
            )
        kind, predicate = predicates[0]
        return await self.wait(action, kind, predicate, timeout)

    async def wait(
        self,
        action: Action,
        kind: str,
        predicate: Callable[[Any], bool],
        timeout: float | None = None,
    ) -> ObservedMessageContexts:
        """Runs action and waits for an event of kind matching predicate."""
        coordinator = WaitCoordinator(
            self._telemetry,
            kind,
            predicate,
            timeout=timeout,
            default_timeout=self._default_timeout,
            no_deadline=self._no_deadline,
        )
        return await coordinator.run(action)
