from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "taskmaster"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger and set its level.

    Safe to call repeatedly: the handler is only added once, later calls
    just change the level.
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    resolved = logging.getLevelName(level.upper())
    # getLevelName returns "Level X" for unknown names
    log.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    if not log.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        log.addHandler(handler)
    return log
