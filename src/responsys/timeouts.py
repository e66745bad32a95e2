"""Deadline enforcement for network-bound calls.

Python threads cannot be pre-empted, so the guard is best-effort: on expiry
the caller gets ``ResponsysTimeoutError`` straight away, while a call that is
already running keeps its worker thread until its own socket timeout fires.
Guarded work should therefore *return* values rather than mutate shared
state, so that a late finisher has nothing to corrupt.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Callable, Optional, TypeVar

from .exceptions import ResponsysTimeoutError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0


def run_with_timeout(deadline: Optional[float], work: Callable[[], T], *, what: str = "call") -> T:
    """Run ``work`` and return its result, or raise if ``deadline`` passes first.

    A ``deadline`` of ``None`` runs ``work`` inline without a guard.
    """
    if deadline is None:
        return work()

    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="responsys-call")
    future = executor.submit(work)
    try:
        return future.result(timeout=deadline)
    except concurrent.futures.TimeoutError:
        future.cancel()
        _logger.warning("Responsys %s exceeded %.1fs deadline; abandoning it.", what, deadline)
        raise ResponsysTimeoutError(deadline, what) from None
    finally:
        executor.shutdown(wait=False)


class TimeoutGuard:
    """Applies one configured deadline to every call it runs."""

    def __init__(self, deadline: Optional[float] = DEFAULT_TIMEOUT) -> None:
        if deadline is not None and deadline <= 0:
            raise ValueError(f"timeout must be positive, got {deadline!r}")
        self.deadline = deadline

    def run(self, work: Callable[[], T], *, what: str = "call") -> T:
        return run_with_timeout(self.deadline, work, what=what)
