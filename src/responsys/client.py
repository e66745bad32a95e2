from __future__ import annotations

import dataclasses
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TextIO, TypeVar, Union

from .env_loader import load_env_files
from .exceptions import SessionReleaseError
from .faults import unwrap_fault
from .members import MergeRules, WireRecord
from .messages import (
    CreateFolder,
    CreateList,
    Field,
    FolderObjectType,
    InteractObject,
    LaunchCampaign,
    ListFolderObjects,
    ListFolders,
    MergeListMembers,
    OptionalData,
    PermissionStatus,
    Recipient,
    RecipientData,
    RecordData,
    Request,
    TriggerCampaignMessage,
)
from .session import Credentials, Session, SessionManager
from .timeouts import DEFAULT_TIMEOUT, TimeoutGuard
from .transport import CallContext, HttpTransport, Transport
from .validation import to_record_rows, validate_member_batch

_logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ENDPOINT = "https://ws2.responsys.net/webservices/services/ResponsysWSService"

# The service cannot encode an empty optional-data collection, so an empty
# trigger always carries this one pair.
PLACEHOLDER_OPTIONAL_DATA = {"foo": "bar"}

_TRUTHY = {"1", "true", "yes", "on"}


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class ClientConfig:
    """Options recognised by ``ResponsysClient``."""

    # Skip the automatic logout after each operation and reuse the session
    keep_alive: bool = False

    endpoint: str = DEFAULT_ENDPOINT

    # Per-call deadline in seconds for login, each operation, and logout
    timeout: Optional[float] = DEFAULT_TIMEOUT

    # Optional text sink receiving raw request/response traffic
    wiredump: Optional[TextIO] = None

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Load configuration from environment variables (and .env, if any)."""
        load_env_files(quiet=True)
        timeout = os.getenv("RESPONSYS_TIMEOUT")
        return cls(
            keep_alive=os.getenv("RESPONSYS_KEEPALIVE", "").strip().lower() in _TRUTHY,
            endpoint=os.getenv("RESPONSYS_ENDPOINT", DEFAULT_ENDPOINT),
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        )


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class ResponsysClient:
    """Responsys Interact client that logs in and out around every call.

    Each business operation runs inside :meth:`with_session`: a session is
    obtained if none is held, the operation runs under the configured
    timeout with service faults unwrapped, and the session is released
    afterwards unless ``keep_alive`` is set.

    One client holds one session. Calls on the same client are serialized;
    use separate clients for concurrent sessions.
    """

    def __init__(
        self,
        username: str,
        password: str,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[Transport] = None,
        **overrides: Any,
    ) -> None:
        # Always a private copy: keep_alive changes must not leak into the caller's config
        self.config = dataclasses.replace(config or ClientConfig(), **overrides)
        self.transport = transport or HttpTransport(self.config.endpoint, wiredump=self.config.wiredump)
        self._guard = TimeoutGuard(self.config.timeout)
        self._sessions = SessionManager(
            self.transport,
            Credentials(username, password),
            Session(keep_alive=self.config.keep_alive),
        )
        self._lock = threading.RLock()
        # Set on the worker thread while a with_session operation runs
        self._scope = threading.local()

    def __enter__(self) -> ResponsysClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --------------------------- Session state -----------------------

    @property
    def session_id(self) -> Optional[str]:
        return self._sessions.token

    @property
    def keep_alive(self) -> bool:
        return self._sessions.session.keep_alive

    @keep_alive.setter
    def keep_alive(self, value: bool) -> None:
        self.config.keep_alive = self._sessions.session.keep_alive = bool(value)

    def login(self) -> None:
        """Open a session now instead of on the first operation."""
        self._refuse_inside_operation("login")
        with self._lock:
            self._open_session()

    def logout(self) -> None:
        """Release the session; local state is cleared even if the call fails."""
        self._refuse_inside_operation("logout")
        with self._lock:
            try:
                self._guard.run(lambda: self._sessions.release(self.config.timeout), what="logout")
            finally:
                self._sessions.clear()

    def close(self) -> None:
        """Log out if a session is still held and close the transport."""
        try:
            if self.session_id is not None:
                self.logout()
        finally:
            close = getattr(self.transport, "close", None)
            if close is not None:
                close()

    # --------------------------- Session scope -----------------------

    def with_session(self, op: Callable[[CallContext], T]) -> T:
        """Run ``op`` with a live session and return its result.

        ``op`` receives the ``CallContext`` to pass to the transport. If the
        operation fails, its error propagates and a failing logout is only
        logged. If the operation succeeds but the logout fails,
        ``SessionReleaseError`` is raised with the result on ``.result``.

        Client operations called from inside ``op`` run inline in the same
        session, under the outer call's deadline.
        """
        outer = self._current_context()
        if outer is not None:
            return unwrap_fault(lambda: op(outer))

        with self._lock:
            failed = True
            try:
                if self._sessions.token is None:
                    self._open_session()
                context = self._sessions.context(self.config.timeout)
                result = self._guard.run(lambda: self._run_operation(op, context), what="operation")
                failed = False
            finally:
                release_error = self._end_session(log_failure=failed)
            if release_error is not None:
                raise SessionReleaseError(result) from release_error
            return result

    def _current_context(self) -> Optional[CallContext]:
        return getattr(self._scope, "context", None)

    def _refuse_inside_operation(self, what: str) -> None:
        if self._current_context() is not None:
            raise RuntimeError(f"{what}() cannot be called from inside with_session")

    def _run_operation(self, op: Callable[[CallContext], T], context: CallContext) -> T:
        self._scope.context = context
        try:
            return unwrap_fault(lambda: op(context))
        finally:
            self._scope.context = None

    def _open_session(self) -> None:
        token = self._guard.run(lambda: self._sessions.authenticate(self.config.timeout), what="login")
        self._sessions.attach(token)

    def _end_session(self, log_failure: bool) -> Optional[Exception]:
        """Log out unless keep-alive is set; return the logout error, if any."""
        if self.keep_alive:
            return None
        try:
            self._guard.run(lambda: self._sessions.release(self.config.timeout), what="logout")
        except Exception as e:
            if log_failure:
                _logger.warning("Responsys logout failed after a failed operation: %s", e, exc_info=True)
            return e
        finally:
            self._sessions.clear()
        return None

    def _submit(self, request: Request) -> Any:
        return self.with_session(lambda context: self.transport.call(request.operation, request, context))

    # --------------------------- Operations --------------------------

    def list_folders(self) -> Any:
        return self._submit(ListFolders())

    def create_folder(self, folder_name: str) -> Any:
        return self._submit(CreateFolder(folder_name=folder_name))

    def list_folder_objects(
        self,
        folder_name: str,
        object_type: Union[FolderObjectType, str] = FolderObjectType.ALL,
    ) -> Any:
        return self._submit(ListFolderObjects(folder_name=folder_name, type=object_type))

    def create_list(
        self,
        folder_name: str,
        list_name: str,
        description: str,
        fields: Iterable[Union[Field, Mapping[str, Any]]],
    ) -> Any:
        request = CreateList(
            list=InteractObject(folder_name, list_name),
            description=description,
            fields=tuple(Field.coerce(f) for f in fields),
        )
        return self._submit(request)

    def merge_members(
        self,
        folder_name: str,
        list_name: str,
        members: Sequence[WireRecord],
        merge_rules: Union[MergeRules, Mapping[str, Any], None] = None,
        permission_status: PermissionStatus = PermissionStatus.OPTIN,
    ) -> Any:
        """Insert or update up to ``MAX_MEMBERS`` members of a list.

        Raises:
            TooManyMembersError: before any network call, if the batch is too big.

        """
        validate_member_batch(members)
        field_names, rows = to_record_rows(members)
        rules = MergeRules.coerce(merge_rules)
        request = MergeListMembers(
            list=InteractObject(folder_name, list_name),
            record_data=RecordData(field_names=field_names, records=tuple(rows)),
            merge_rule=rules.to_list_merge_rule(permission_status),
        )
        _logger.debug("Merging %d member(s) into %s/%s", len(rows), folder_name, list_name)
        return self._submit(request)

    save_members = merge_members

    def launch_campaign(self, folder_name: str, campaign_name: str) -> Any:
        return self._submit(LaunchCampaign(campaign=InteractObject(folder_name, campaign_name)))

    def trigger_campaign_message(
        self,
        folder_name: str,
        campaign_name: str,
        email_address: str,
        optional_data: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        data = dict(optional_data or {}) or dict(PLACEHOLDER_OPTIONAL_DATA)
        recipient_data = RecipientData(
            recipient=Recipient(email_address=email_address),
            optional_data=tuple(OptionalData(str(name), value) for name, value in data.items()),
        )
        request = TriggerCampaignMessage(
            campaign=InteractObject(folder_name, campaign_name),
            recipient_data=recipient_data,
        )
        return self._submit(request)
