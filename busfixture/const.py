"""Constants for busfixture."""

# Event kinds emitted by an endpoint's message pipeline
KIND_INCOMING_MESSAGE = "incoming_logical_message"
KIND_OUTGOING_MESSAGE = "outgoing_logical_message"
KIND_INVOKED_HANDLER = "invoked_handler"

MONITORED_KINDS = (
    KIND_INCOMING_MESSAGE,
    KIND_OUTGOING_MESSAGE,
    KIND_INVOKED_HANDLER,
)

# Wait coordinator states
STATE_IDLE = "idle"
STATE_ARMED = "armed"
STATE_RACING = "racing"
STATE_DRAINED = "drained"

# Seconds to wait for the awaited event when no timeout is given
DEFAULT_TIMEOUT = 10.0

# Truthy value disables deadlines, same as having a debugger attached
ENV_NO_DEADLINE = "BUSFIXTURE_NO_DEADLINE"
ENV_TRUTHY_VALUES = ("1", "true", "yes", "on")
