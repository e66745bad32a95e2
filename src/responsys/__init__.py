"""Session-scoped client for the Responsys Interact API."""

import logging

from ._version import __version__
from .client import DEFAULT_ENDPOINT, ClientConfig, ResponsysClient
from .exceptions import (
    AccountFault,
    CampaignFault,
    FolderFault,
    InconsistentPermissionStatusError,
    ListFault,
    MethodsNotSupportedError,
    MissingCredentialsError,
    ResponsysError,
    ResponsysTimeoutError,
    ServiceFault,
    SessionReleaseError,
    TooManyMembersError,
    TransportFault,
    TriggeredMessageFault,
    UnexpectedErrorFault,
)
from .members import Member, MergeRules, WireRecord
from .messages import (
    ExceptionCode,
    Field,
    FieldType,
    FolderObjectType,
    MatchOperator,
    PermissionStatus,
    UpdateOnMatch,
)
from .transport import CallContext, HttpTransport, Transport
from .validation import MAX_MEMBERS

__author__ = "responsys contributors"
__license__ = "MIT"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "AccountFault",
    "CallContext",
    "CampaignFault",
    "ClientConfig",
    "DEFAULT_ENDPOINT",
    "ExceptionCode",
    "Field",
    "FieldType",
    "FolderFault",
    "FolderObjectType",
    "HttpTransport",
    "InconsistentPermissionStatusError",
    "ListFault",
    "MAX_MEMBERS",
    "MatchOperator",
    "Member",
    "MergeRules",
    "MethodsNotSupportedError",
    "MissingCredentialsError",
    "PermissionStatus",
    "ResponsysClient",
    "ResponsysError",
    "ResponsysTimeoutError",
    "ServiceFault",
    "SessionReleaseError",
    "TooManyMembersError",
    "Transport",
    "TransportFault",
    "TriggeredMessageFault",
    "UnexpectedErrorFault",
    "UpdateOnMatch",
    "WireRecord",
]
