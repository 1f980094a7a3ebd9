"""
Diagnostics hook for the computation core.

The indicator and risk calculations never log on their own. Callers that want
diagnostics pass a hook; the service layer passes one backed by ``logging``.
"""

import logging
from typing import Any, Callable, Optional

DiagnosticsHook = Callable[[str, dict[str, Any]], None]


def emit(hook: Optional[DiagnosticsHook], event: str, **fields: Any) -> None:
    """Send an event to the hook, if one was injected."""
    if hook is not None:
        hook(event, fields)


def logging_hook(logger: logging.Logger, level: int = logging.DEBUG) -> DiagnosticsHook:
    """Build a hook that writes events to ``logger`` as key=value pairs."""

    def _hook(event: str, fields: dict[str, Any]) -> None:
        if not logger.isEnabledFor(level):
            return
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        logger.log(level, f"{event} {details}".rstrip())

    return _hook
