from __future__ import annotations

import logging
import os
from typing import Optional, Union

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

LEVEL_VAR = "RESPONSYS_LOG_LEVEL"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv(LEVEL_VAR) or logging.WARNING
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level


def configure_logging(level: Union[int, str, None] = None, *, http_debug: bool = False) -> int:
    """Set up logging for the ``responsys`` loggers and return the level used.

    ``level`` falls back to ``$RESPONSYS_LOG_LEVEL`` and then WARNING. The
    root logger is only given a handler if nothing configured one already.
    Calls run on worker threads, so the thread name is part of the format.
    urllib3 connection logging stays at ERROR unless ``http_debug`` is set.
    """
    lvl = _resolve_level(level)
    root = logging.getLogger()

    if root.handlers:
        root.setLevel(min(root.level or lvl, lvl))
    else:
        logging.basicConfig(level=lvl, format=_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT)

    logging.getLogger("responsys").setLevel(lvl)
    logging.getLogger("urllib3.connection").setLevel(logging.DEBUG if http_debug else logging.ERROR)
    return lvl
