"""A python library for integration tests that run an action and wait for the
telemetry events a message endpoint emits in response."""

from . import const
from .buffer import EventBuffer
from .context import (
    ActiveSagaInstance,
    Event,
    IncomingLogicalMessageContext,
    InvokeHandlerContext,
    LogicalMessage,
    OutgoingLogicalMessageContext,
)
from .coordinator import ObservedMessageContexts, WaitCoordinator
from .dispatcher import Dispatcher
from .error import BusFixtureError, PredicateFault, TimeoutExceeded
from .fixture import EndpointFixture
from .gate import CompletionGate
from .subscription import StreamSubscription
from .telemetry import Telemetry

__all__ = [
    "const",
    "ActiveSagaInstance",
    "BusFixtureError",
    "CompletionGate",
    "Dispatcher",
    "EndpointFixture",
    "Event",
    "EventBuffer",
    "IncomingLogicalMessageContext",
    "InvokeHandlerContext",
    "LogicalMessage",
    "ObservedMessageContexts",
    "OutgoingLogicalMessageContext",
    "PredicateFault",
    "StreamSubscription",
    "Telemetry",
    "TimeoutExceeded",
    "WaitCoordinator",
]

__version__ = "1.0.0"
