from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

ENV_FILE_VAR = "RESPONSYS_ENV_FILE"


def default_env_files() -> List[Path]:
    """Where RESPONSYS_* settings are looked for, most specific first.

    ``$RESPONSYS_ENV_FILE`` if set, then ``.env`` in the working directory,
    then ``~/.responsys.env``.
    """
    paths = []
    explicit = os.getenv(ENV_FILE_VAR)
    if explicit:
        paths.append(Path(explicit).expanduser())
    paths.append(Path.cwd() / ".env")
    paths.append(Path.home() / ".responsys.env")
    return paths


def load_env_files(
    candidates: Optional[Iterable[Path]] = None,
    *,
    quiet: bool = False,
) -> Optional[Path]:
    """Load the first existing env file; returns it, or None.

    Variables already present in the environment are never overridden.
    """
    if candidates is None:
        candidates = default_env_files()

    for path in candidates:
        if path.is_file():
            load_dotenv(path, override=False)
            if not quiet:
                _logger.debug("Loaded Responsys settings from %s", path)
            return path

    if not quiet:
        _logger.debug("No Responsys env file found")
    return None
