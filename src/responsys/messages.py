"""Typed request and response values exchanged with the transport.

Every request is a frozen dataclass carrying the remote ``operation`` name and
the ``response_type`` the transport should decode a successful reply into.
``to_payload()`` renders the request as a plain dict with camelCase keys;
how that dict travels over the wire is the transport's business.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Union


# ----------------------------------------------------------------------
# Enumerations
# ----------------------------------------------------------------------
class PermissionStatus(str, enum.Enum):
    OPTIN = "OPTIN"
    OPTOUT = "OPTOUT"


class UpdateOnMatch(str, enum.Enum):
    REPLACE_ALL = "REPLACE_ALL"
    NO_UPDATE = "NO_UPDATE"


class MatchOperator(str, enum.Enum):
    NONE = "NONE"
    AND = "AND"


class FieldType(str, enum.Enum):
    STR500 = "STR500"
    STR4000 = "STR4000"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    TIMESTAMP = "TIMESTAMP"


class FolderObjectType(str, enum.Enum):
    ALL = "ALL"
    LIST = "LIST"
    CAMPAIGN = "CAMPAIGN"
    DOCUMENT = "DOCUMENT"
    FORM = "FORM"
    PROFILE_EXTENSION = "PROFILE_EXTENSION"
    SUPPLEMENTAL_TABLE = "SUPPLEMENTAL_TABLE"


class ExceptionCode(str, enum.Enum):
    INVALID_USER_NAME = "INVALID_USER_NAME"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    INVALID_SESSION_ID = "INVALID_SESSION_ID"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    FOLDER_ALREADY_EXISTS = "FOLDER_ALREADY_EXISTS"
    LIST_NOT_FOUND = "LIST_NOT_FOUND"
    LIST_ALREADY_EXISTS = "LIST_ALREADY_EXISTS"
    CAMPAIGN_NOT_FOUND = "CAMPAIGN_NOT_FOUND"
    RECIPIENT_NOT_FOUND = "RECIPIENT_NOT_FOUND"
    UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"

    @classmethod
    def coerce(cls, value: Any) -> Union[ExceptionCode, Any]:
        """Return the enum member for ``value`` or ``value`` itself if unknown."""
        try:
            return cls(value)
        except ValueError:
            return value


# ----------------------------------------------------------------------
# Serialization helpers
# ----------------------------------------------------------------------
def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_wire(value: Any) -> Any:
    """Convert dataclasses, enums and containers to JSON-ready values."""
    if isinstance(value, enum.Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {_camel(f.name): to_wire(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): to_wire(v) for k, v in value.items()}
    return value


# ----------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class ServiceResponse:
    """Decoded reply of a business operation; ``result`` is left as sent."""

    result: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> ServiceResponse:
        if isinstance(payload, Mapping):
            return cls(result=payload.get("result"))
        return cls(result=payload)


@dataclass(frozen=True)
class LoginResponse:
    session_id: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> LoginResponse:
        result = payload.get("result") or {}
        return cls(session_id=result["sessionId"])


# ----------------------------------------------------------------------
# Building blocks
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class InteractObject:
    folder_name: str
    object_name: str


@dataclass(frozen=True)
class Field:
    name: str
    type: Union[FieldType, str] = FieldType.STR500
    custom: bool = False
    key: bool = False

    @classmethod
    def coerce(cls, value: Union[Field, Mapping[str, Any]]) -> Field:
        """Accept a ``Field`` or a mapping with name/type/custom/key keys."""
        if isinstance(value, Field):
            return value
        return cls(
            name=value["name"],
            type=value.get("type", FieldType.STR500),
            custom=bool(value.get("custom", False)),
            key=bool(value.get("key", False)),
        )


@dataclass(frozen=True)
class RecordData:
    field_names: Tuple[str, ...]
    records: Tuple[Tuple[Optional[str], ...], ...]


@dataclass(frozen=True)
class ListMergeRule:
    insert_on_no_match: bool = True
    update_on_match: UpdateOnMatch = UpdateOnMatch.REPLACE_ALL
    match_column_name_1: Optional[str] = None
    match_column_name_2: Optional[str] = None
    match_column_name_3: Optional[str] = None
    match_operator: MatchOperator = MatchOperator.NONE
    default_permission_status: PermissionStatus = PermissionStatus.OPTIN


@dataclass(frozen=True)
class Recipient:
    email_address: str


@dataclass(frozen=True)
class OptionalData:
    name: str
    value: Any


@dataclass(frozen=True)
class RecipientData:
    recipient: Recipient
    optional_data: Tuple[OptionalData, ...] = ()


# ----------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------
class Request:
    operation: ClassVar[str]
    response_type: ClassVar[Any] = ServiceResponse

    def to_payload(self) -> Dict[str, Any]:
        return to_wire(self)


@dataclass(frozen=True)
class Login(Request):
    operation: ClassVar[str] = "login"
    response_type: ClassVar[Any] = LoginResponse

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Logout(Request):
    operation: ClassVar[str] = "logout"


@dataclass(frozen=True)
class ListFolders(Request):
    operation: ClassVar[str] = "listFolders"


@dataclass(frozen=True)
class CreateFolder(Request):
    operation: ClassVar[str] = "createFolder"

    folder_name: str


@dataclass(frozen=True)
class ListFolderObjects(Request):
    operation: ClassVar[str] = "listFolderObjects"

    folder_name: str
    type: Union[FolderObjectType, str] = FolderObjectType.ALL


@dataclass(frozen=True)
class CreateList(Request):
    operation: ClassVar[str] = "createList"

    list: InteractObject
    description: str = ""
    fields: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class MergeListMembers(Request):
    operation: ClassVar[str] = "mergeListMembers"

    list: InteractObject
    record_data: RecordData
    merge_rule: ListMergeRule


@dataclass(frozen=True)
class LaunchCampaign(Request):
    operation: ClassVar[str] = "launchCampaign"

    campaign: InteractObject


@dataclass(frozen=True)
class TriggerCampaignMessage(Request):
    operation: ClassVar[str] = "triggerCampaignMessage"

    campaign: InteractObject
    recipient_data: RecipientData
