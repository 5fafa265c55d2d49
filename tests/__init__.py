"""Unit tests."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from busfixture.context import (
    ActiveSagaInstance,
    IncomingLogicalMessageContext,
    InvokeHandlerContext,
    LogicalMessage,
    OutgoingLogicalMessageContext,
)
from busfixture.dispatcher import Dispatcher

_LOGGER = logging.getLogger(__name__)


def create_signal(dispatcher: Dispatcher, target_kind: str) -> asyncio.Event:
    """Returns an asyncio event that is triggered when an event of kind is emitted."""
    trigger = asyncio.Event()

    async def handler(event):
        if event.kind == target_kind:
            trigger.set()

    dispatcher.connect(handler)

    return trigger


def incoming(instance: Any, message_id: str = "") -> IncomingLogicalMessageContext:
    """Returns context for a received message."""
    return IncomingLogicalMessageContext(LogicalMessage.from_instance(instance), message_id)


def outgoing(instance: Any, message_id: str = "") -> OutgoingLogicalMessageContext:
    """Returns context for a sent message."""
    return OutgoingLogicalMessageContext(LogicalMessage.from_instance(instance), message_id)


def invoked(
    handler_type: type, instance: Any, saga: ActiveSagaInstance | None = None
) -> InvokeHandlerContext:
    """Returns context for a handler invocation."""
    return InvokeHandlerContext(handler_type, LogicalMessage.from_instance(instance), saga)
