"""Detection of an interactive debugging session."""

from __future__ import annotations

import logging
import os
import sys

from . import const

_LOGGER = logging.getLogger(__name__)


def debugger_attached() -> bool:
    """Returns if waits should run without a deadline.

    True when a pydevd or debugpy client is attached, or when the
    BUSFIXTURE_NO_DEADLINE environment variable is set to a truthy value.
    """
    if os.environ.get(const.ENV_NO_DEADLINE, "").strip().lower() in (
        const.ENV_TRUTHY_VALUES
    ):
        _LOGGER.debug("Deadlines disabled by %s", const.ENV_NO_DEADLINE)
        return True

    pydevd = sys.modules.get("pydevd")
    if pydevd is not None:
        get_debugger = getattr(pydevd, "GetGlobalDebugger", None)
        if get_debugger is not None and get_debugger() is not None:
            _LOGGER.debug("Deadlines disabled, pydevd attached")
            return True

    debugpy = sys.modules.get("debugpy")
    if debugpy is not None:
        is_connected = getattr(debugpy, "is_client_connected", None)
        if is_connected is not None and is_connected():
            _LOGGER.debug("Deadlines disabled, debugpy client connected")
            return True

    return False
