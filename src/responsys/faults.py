"""Unwrapping of generic transport faults into the business fault they carry."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from .exceptions import TransportFault

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _inner_exception(fault: TransportFault) -> BaseException | None:
    inner = fault.inner_fault()
    if inner is None:
        return None
    if not isinstance(inner, BaseException):
        _logger.debug("Fault detail for %r is not an exception: %r", fault.fault_string, inner)
        return None
    return inner


@contextmanager
def application_errors() -> Iterator[None]:
    """Re-raise a ``TransportFault`` as the specific fault in its detail, if any."""
    try:
        yield
    except TransportFault as exc:
        inner = _inner_exception(exc)
        if inner is not None:
            raise inner from exc
        raise


def unwrap_fault(work: Callable[[], T]) -> T:
    """Run ``work`` under :func:`application_errors` and return its result."""
    with application_errors():
        return work()
