from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, TextIO

import requests

from .exceptions import FAULT_TYPES, TransportFault
from .messages import ExceptionCode, Request

_logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"
_MASKED_KEYS = frozenset({"password"})


@dataclass(frozen=True)
class CallContext:
    """Per-call values attached to every transport invocation."""

    session_id: Optional[str] = None
    timeout: Optional[float] = None


class Transport(ABC):
    """Sends one typed request and returns the decoded response."""

    @abstractmethod
    def call(self, operation: str, request: Request, context: CallContext) -> Any:
        """
        Perform ``operation`` remotely.

        Raises:
            TransportFault: when the service answers with a fault envelope.

        """


def _masked(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        return {k: ("***" if k in _MASKED_KEYS else _masked(v)) for k, v in payload.items()}
    if isinstance(payload, list):
        return [_masked(v) for v in payload]
    return payload


def decode_fault_detail(key: str, value: Any) -> Any:
    """Turn one ``detail`` entry into a ``ServiceFault`` when the key is known."""
    fault_cls = FAULT_TYPES.get(key)
    if fault_cls is None or not isinstance(value, Mapping):
        return value
    return fault_cls(
        ExceptionCode.coerce(value.get("exceptionCode")),
        value.get("exceptionMessage") or "",
    )


# ----------------------------------------------------------------------
# JSON-over-HTTP binding
# ----------------------------------------------------------------------
class HttpTransport(Transport):
    """POSTs each request as JSON to ``{endpoint}/{operation}``.

    The session id travels in the ``X-Session-Id`` header and the call
    context's timeout is used as the socket timeout. A fault reply looks like
    ``{"fault": {"faultString": "AccountFault", "detail": {"AccountFault":
    {"exceptionCode": "INVALID_USER_NAME", "exceptionMessage": "..."}}}}``.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        wiredump: Optional[TextIO] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.wiredump = wiredump
        self.session = session or requests.Session()

    def call(self, operation: str, request: Request, context: CallContext) -> Any:
        url = f"{self.endpoint}/{operation}"
        payload = request.to_payload()
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if context.session_id:
            headers[SESSION_HEADER] = context.session_id

        _logger.debug("POST %s", url)
        self._dump(">", f"POST {url}", json.dumps(_masked(payload)))
        r = self.session.request(
            "POST",
            url,
            data=json.dumps(payload),
            headers=headers,
            timeout=context.timeout,
        )
        self._dump("<", f"HTTP {r.status_code}", r.text)

        if r.status_code < 400:
            body = r.json() if r.content else {}
            return request.response_type.from_payload(body)

        fault = self._decode_fault(r)
        if fault is not None:
            _logger.debug("%s returned fault %s", operation, fault.fault_string)
            raise fault

        _logger.error("HTTP %s error for %s: %s", r.status_code, url, r.text)
        r.raise_for_status()
        raise TransportFault(f"HTTP {r.status_code}")

    def close(self) -> None:
        self.session.close()

    # --------------------------- Internal helpers --------------------

    @staticmethod
    def _decode_fault(r: requests.Response) -> Optional[TransportFault]:
        try:
            body = r.json()
        except ValueError:
            return None
        fault = body.get("fault") if isinstance(body, Mapping) else None
        if not isinstance(fault, Mapping) or not fault.get("faultString"):
            return None
        detail = fault.get("detail") or {}
        return TransportFault(
            fault["faultString"],
            {key: decode_fault_detail(key, value) for key, value in detail.items()},
        )

    def _dump(self, direction: str, line: str, body: str) -> None:
        if self.wiredump is None:
            return
        self.wiredump.write(f"{direction} {line}\n{body}\n")
        flush = getattr(self.wiredump, "flush", None)
        if flush is not None:
            flush()
