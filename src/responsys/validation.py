from __future__ import annotations

from typing import List, Sequence, Tuple

from .exceptions import TooManyMembersError
from .members import WireFields, WireRecord

MAX_MEMBERS = 200


def validate_member_batch(members: Sequence[WireRecord]) -> None:
    """Fail fast if ``members`` cannot be sent in one merge call."""
    if len(members) > MAX_MEMBERS:
        raise TooManyMembersError(len(members), MAX_MEMBERS)


def to_record_rows(members: Sequence[WireRecord]) -> Tuple[Tuple[str, ...], List[Tuple]]:
    """Split members into one shared header and one value row per member.

    Raises:
        ValueError: if a member does not render the same columns, in the same
            order, as the first one.

    """
    header: Tuple[str, ...] = ()
    rows: List[Tuple] = []
    for index, member in enumerate(members):
        record: WireFields = member.to_wire_record()
        names = tuple(name for name, _ in record)
        if index == 0:
            header = names
        elif names != header:
            raise ValueError(f"Member #{index} has columns {list(names)}, expected {list(header)}")
        rows.append(tuple(value for _, value in record))
    return header, rows
