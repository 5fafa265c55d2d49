"""Events and the message pipeline contexts they carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Event:
    """An observed occurrence tagged with the kind of source that emitted it."""

    kind: str
    payload: Any


@dataclass(frozen=True)
class LogicalMessage:
    """A message instance and the type it was sent or received as."""

    message_type: type
    instance: Any = None

    @classmethod
    def from_instance(cls, instance: Any) -> LogicalMessage:
        """Returns a logical message typed by the class of instance."""
        return cls(type(instance), instance)


@dataclass(frozen=True)
class IncomingLogicalMessageContext:
    """A message received by an endpoint."""

    message: LogicalMessage
    message_id: str = ""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OutgoingLogicalMessageContext:
    """A message sent or published by an endpoint."""

    message: LogicalMessage
    message_id: str = ""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ActiveSagaInstance:
    """Saga loaded for a handler invocation.

    The instance is expected to expose a boolean `completed` attribute.
    """

    instance: Any = None
    not_found: bool = False

    @property
    def completed(self) -> bool:
        """Returns if the saga was found and marked itself as completed."""
        if self.not_found or self.instance is None:
            return False
        return bool(getattr(self.instance, "completed", False))


@dataclass(frozen=True)
class InvokeHandlerContext:
    """A handler invoked for a message."""

    handler_type: type
    message: LogicalMessage
    saga: ActiveSagaInstance | None = None
