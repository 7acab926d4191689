"""Parsing of ``table:column:type[:offset]`` target specifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Iterable

from .exceptions import (
    DuplicateAliasError,
    InvalidOffsetError,
    InvalidTypeError,
    MalformedTargetError,
)

DEFAULT_OFFSET = timedelta(hours=24)

SCHEMA_SEPARATOR = "."


class TargetKind(str, Enum):
    """How the freshness column stores time."""
    TIMESTAMP = "timestamp"
    INTEGER = "integer"


@dataclass(frozen=True)
class Target:
    """One monitored table."""
    table: str
    column: str
    kind: TargetKind
    offset: timedelta = DEFAULT_OFFSET

    @property
    def alias(self) -> str:
        # Unquoted identifiers fold to lower case on Redshift/PostgreSQL.
        return self.table.replace(SCHEMA_SEPARATOR, "_").lower()

    @property
    def delay_column(self) -> str:
        return f"{self.alias}_delay"

    @property
    def count_column(self) -> str:
        return f"{self.alias}_count"


def _parse_offset(value: str, raw: str) -> timedelta:
    # Plain ASCII digits only: no sign, whitespace or underscores.
    if not (value.isascii() and value.isdigit()):
        raise InvalidOffsetError(value, raw)
    hours = int(value)
    if hours <= 0:
        raise InvalidOffsetError(value, raw)
    return timedelta(hours=hours)


def parse_target(raw: str) -> Target:
    fields = raw.split(":")
    if len(fields) < 3 or len(fields) > 4:
        raise MalformedTargetError(raw)

    table, column, kind = fields[0], fields[1], fields[2]
    if not table or not column:
        raise MalformedTargetError(raw, "table and column must not be empty")

    # Enum lookup by value is case-sensitive.
    try:
        target_kind = TargetKind(kind)
    except ValueError:
        raise InvalidTypeError(kind, raw) from None

    offset = DEFAULT_OFFSET
    if len(fields) == 4:
        offset = _parse_offset(fields[3], raw)

    return Target(table=table, column=column, kind=target_kind, offset=offset)


def parse_targets(raws: Iterable[str]) -> list[Target]:
    """Parse every raw spec in order, failing on the first invalid one.

    Aliases must be unique: ``a.b`` and ``a_b`` would both map to ``a_b`` and
    corrupt the SELECT/FROM column mapping.
    """
    targets: list[Target] = []
    seen: dict[str, str] = {}
    for raw in raws:
        target = parse_target(raw)
        if target.alias in seen:
            raise DuplicateAliasError(target.alias, seen[target.alias], raw)
        seen[target.alias] = raw
        targets.append(target)

    if not targets:
        raise MalformedTargetError("", "no targets given")
    return targets
