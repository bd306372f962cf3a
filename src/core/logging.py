from __future__ import annotations

import logging
import sys
from typing import Optional


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Transport libraries log every request line at INFO.
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: Optional[str] = None) -> None:
    requested = (level or "INFO").upper()
    resolved = logging.getLevelName(requested)
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if resolved == logging.INFO and requested != "INFO":
        logging.getLogger(__name__).warning("Unknown LOG_LEVEL %r, using INFO", level)
