"""Member records uploaded by ``ResponsysClient.merge_members``."""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from .messages import ListMergeRule, MatchOperator, PermissionStatus, UpdateOnMatch

WireFields = Sequence[Tuple[str, Optional[str]]]

_RULE_ALIASES = {
    "match_col1": "match_column_1",
    "match_col2": "match_column_2",
    "match_col3": "match_column_3",
    "operator": "match_operator",
}


@runtime_checkable
class WireRecord(Protocol):
    """Anything that can render itself as ordered ``(column, value)`` pairs."""

    def to_wire_record(self) -> WireFields: ...


def _wire_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


class Member:
    """A list member built from keyword columns, kept in the given order.

    Column names are upper-cased on the wire, so ``email_address_`` becomes
    the ``EMAIL_ADDRESS_`` system column.
    """

    def __init__(self, **columns: Any) -> None:
        self._columns = dict(columns)

    def __getattr__(self, name: str) -> Any:
        try:
            return self.__dict__["_columns"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        cols = ", ".join(f"{k}={v!r}" for k, v in self._columns.items())
        return f"Member({cols})"

    def to_wire_record(self) -> WireFields:
        return [(name.upper(), _wire_value(value)) for name, value in self._columns.items()]


@dataclass(frozen=True)
class MergeRules:
    """How uploaded members are matched against existing list records."""

    match_column_1: Optional[str] = None
    match_column_2: Optional[str] = None
    match_column_3: Optional[str] = None
    match_operator: MatchOperator = MatchOperator.NONE
    insert_on_no_match: bool = True
    update_on_match: UpdateOnMatch = UpdateOnMatch.REPLACE_ALL

    @classmethod
    def coerce(cls, value: Union[MergeRules, Mapping[str, Any], None]) -> MergeRules:
        """Accept ``MergeRules``, a mapping of its field names, or ``None``.

        The short keys ``match_col1``..``match_col3`` and ``operator`` are
        accepted as well; string enum values are converted.
        """
        if value is None:
            return cls()
        if isinstance(value, MergeRules):
            return value
        options = {_RULE_ALIASES.get(key, key): option for key, option in value.items()}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown merge rule option(s): {', '.join(unknown)}")
        if len(options) != len(value):
            raise ValueError(f"Merge rule option given twice: {sorted(value)}")
        if isinstance(options.get("match_operator"), str):
            options["match_operator"] = MatchOperator(options["match_operator"].upper())
        if isinstance(options.get("update_on_match"), str):
            options["update_on_match"] = UpdateOnMatch(options["update_on_match"].upper())
        return cls(**options)

    def to_list_merge_rule(self, permission_status: PermissionStatus) -> ListMergeRule:
        return ListMergeRule(
            insert_on_no_match=self.insert_on_no_match,
            update_on_match=self.update_on_match,
            match_column_name_1=self.match_column_1,
            match_column_name_2=self.match_column_2,
            match_column_name_3=self.match_column_3,
            match_operator=self.match_operator,
            default_permission_status=permission_status,
        )
