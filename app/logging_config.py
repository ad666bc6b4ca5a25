"""
Logging setup for the service.

Request lines come from the HTTP middleware in ``main``, so uvicorn's
own access log is quieted to avoid logging every request twice.
"""

import logging
from typing import List, Optional

QUIET_LOGGERS = ("uvicorn.access", "redis")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Send records to the console (and ``logfile`` if given) at ``level``.

    Handlers are only attached when the root logger has none yet.
    """
    if not logging.getLogger().handlers:
        handlers: List[logging.Handler] = [logging.StreamHandler()]
        if logfile:
            handlers.append(logging.FileHandler(logfile, encoding="utf-8"))
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            handlers=handlers,
        )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
