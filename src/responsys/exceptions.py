from __future__ import annotations

from typing import Any, Mapping, Optional


class ResponsysError(Exception):
    """Base class for every error raised by the responsys client."""


class MissingCredentialsError(ResponsysError, ValueError):
    """Raised when the client is built without a username or password."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required credentials: " + ", ".join(missing))


class TooManyMembersError(ResponsysError):
    """Raised before any network call when a member batch is too large."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Cannot merge {count} members in one call (limit is {limit})")


class ResponsysTimeoutError(ResponsysError, TimeoutError):
    """A guarded call (login, operation or logout) ran past its deadline."""

    def __init__(self, deadline: float, what: str = "call"):
        self.deadline = deadline
        super().__init__(f"Responsys {what} timed out after {deadline:g}s")


# Declared for member-field validation that is currently switched off.
class MethodsNotSupportedError(ResponsysError):
    pass


class InconsistentPermissionStatusError(ResponsysError):
    pass


class TransportFault(ResponsysError):
    """Generic remote-call failure wrapping a more specific fault.

    ``detail`` maps fault-string keys to the inner fault the service reported.
    """

    def __init__(self, fault_string: str, detail: Optional[Mapping[str, Any]] = None):
        self.fault_string = fault_string
        self.detail = dict(detail or {})
        super().__init__(fault_string)

    def inner_fault(self) -> Any:
        return self.detail.get(self.fault_string)


class ServiceFault(ResponsysError):
    """A business fault reported by the Responsys service."""

    def __init__(self, exception_code: Any = None, message: str = ""):
        self.exception_code = exception_code
        self.message = message
        code = getattr(exception_code, "value", exception_code)
        super().__init__(f"{code}: {message}" if message else str(code))


class AccountFault(ServiceFault):
    pass


class ListFault(ServiceFault):
    pass


class FolderFault(ServiceFault):
    pass


class CampaignFault(ServiceFault):
    pass


class TriggeredMessageFault(ServiceFault):
    pass


class UnexpectedErrorFault(ServiceFault):
    pass


FAULT_TYPES: dict[str, type[ServiceFault]] = {
    cls.__name__: cls
    for cls in (
        AccountFault,
        ListFault,
        FolderFault,
        CampaignFault,
        TriggeredMessageFault,
        UnexpectedErrorFault,
    )
}


class SessionReleaseError(ResponsysError):
    """The operation succeeded but the trailing logout failed.

    The operation's result is kept on ``result``; the logout failure is the
    ``__cause__``.
    """

    def __init__(self, result: Any):
        self.result = result
        super().__init__("Operation succeeded but logout failed")
