from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import MissingCredentialsError
from .faults import unwrap_fault
from .messages import Login, Logout
from .transport import CallContext, Transport

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        missing = [name for name, value in (("username", self.username), ("password", self.password)) if not value]
        if missing:
            raise MissingCredentialsError(missing)


@dataclass
class Session:
    """Client-local session state. ``token`` is ``None`` when logged out."""

    token: Optional[str] = None
    keep_alive: bool = False


class SessionManager:
    """Obtains, holds and releases the session token of one client."""

    def __init__(self, transport: Transport, credentials: Credentials, session: Optional[Session] = None) -> None:
        self.transport = transport
        self.credentials = credentials
        self.session = session or Session()

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    def context(self, timeout: Optional[float] = None) -> CallContext:
        return CallContext(session_id=self.session.token, timeout=timeout)

    # --------------------------- Login -------------------------------

    def authenticate(self, timeout: Optional[float] = None) -> str:
        """Log in remotely and return the new session id without storing it."""
        request = Login(username=self.credentials.username, password=self.credentials.password)
        _logger.info("Logging in to Responsys as %s", self.credentials.username)
        response = unwrap_fault(lambda: self.transport.call(request.operation, request, CallContext(timeout=timeout)))
        return response.session_id

    def attach(self, token: str) -> None:
        self.session.token = token
        _logger.debug("Session attached.")

    def login(self, timeout: Optional[float] = None) -> None:
        self.attach(self.authenticate(timeout))

    # --------------------------- Logout ------------------------------

    def release(self, timeout: Optional[float] = None) -> None:
        """Log out remotely. Does nothing when no session is held."""
        if self.session.token is None:
            _logger.debug("No active session; skipping remote logout.")
            return
        request = Logout()
        _logger.info("Logging out of Responsys.")
        unwrap_fault(lambda: self.transport.call(request.operation, request, self.context(timeout)))

    def clear(self) -> None:
        self.session.token = None

    def logout(self, timeout: Optional[float] = None) -> None:
        try:
            self.release(timeout)
        finally:
            self.clear()
