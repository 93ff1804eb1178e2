"""Loguru integration for scalarenforce.

Library modules log through the shared loguru ``logger`` bound with their
module name; nothing is installed or removed at import time.

Report-only warnings carry two extras:
- ``scalar_key``: the parameter name or index that failed
- ``context``: the call-site label, or ``"-"`` when none was given

Their file, function and line are the caller's, not the validator's.
Applications that want these diagnostics formatted call ``setup_logging``.
"""

from __future__ import annotations

import sys
from typing import Any

from loguru import logger

__all__ = ["DIAGNOSTIC_FORMAT", "get_logger", "logger", "setup_logging"]

# Call site, failing key and context ahead of the message
DIAGNOSTIC_FORMAT = (
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "key={extra[scalar_key]} context={extra[context]} - "
    "<level>{message}</level>"
)

# JSON format for structured logging (loguru serialises the whole record)
JSON_FORMAT = "{message}"


def _is_diagnostic(record: dict[str, Any]) -> bool:
    return "scalar_key" in record["extra"]


def setup_logging(
    sink: Any = None,
    level: str = "WARNING",
    json_output: bool = False,
) -> int:
    """Add a loguru sink for scalar enforcement diagnostics.

    Only records carrying a ``scalar_key`` extra reach the sink, so other
    handlers and the host application's own logging are left untouched.

    Args:
        sink: Any loguru sink (stream, path, callable). Defaults to stderr.
        level: Minimum level to emit.
        json_output: If True, write one serialised JSON record per line.

    Returns:
        Handler id, for ``logger.remove``.
    """
    if sink is None:
        sink = sys.stderr

    if json_output:
        return logger.add(
            sink,
            format=JSON_FORMAT,
            serialize=True,
            level=level,
            filter=_is_diagnostic,
        )
    return logger.add(sink, format=DIAGNOSTIC_FORMAT, level=level, filter=_is_diagnostic)


def get_logger(name: str = "scalarenforce") -> Any:
    """Get a logger instance bound with the given name.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        Logger instance bound with the name context.
    """
    return logger.bind(name=name)
