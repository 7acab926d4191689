"""Error taxonomy for the import-stats plugin.

Parse-time errors (TargetSpecError subclasses) are raised before any query is
built; the remaining errors abort a single fetch cycle.
"""

from __future__ import annotations


class ImportStatsError(Exception):
    """Base class for every error raised by the plugin."""


class TargetSpecError(ImportStatsError):
    """A raw ``table:column:type[:offset]`` string was rejected."""

    def __init__(self, message: str, raw: str):
        self.raw = raw
        super().__init__(message)


class MalformedTargetError(TargetSpecError):
    def __init__(self, raw: str, reason: str = "must be table:column:type(:offset) format"):
        super().__init__(f"Can't parse target: {raw!r}, {reason}.", raw)


class InvalidTypeError(TargetSpecError):
    def __init__(self, value: str, raw: str):
        self.value = value
        super().__init__(f"Invalid type: {value!r}, target: {raw!r}", raw)


class InvalidOffsetError(TargetSpecError):
    def __init__(self, value: str, raw: str):
        self.value = value
        super().__init__(
            f"Invalid offset: {value!r}, target: {raw!r} (must be a positive number of hours)",
            raw,
        )


class DuplicateAliasError(TargetSpecError):
    """Two targets resolve to the same derived-table alias."""

    def __init__(self, alias: str, first: str, second: str):
        self.alias = alias
        self.first = first
        super().__init__(
            f"Duplicate alias {alias!r}: targets {first!r} and {second!r} collide",
            second,
        )


class DatabaseConnectionError(ImportStatsError):
    """The database session could not be established."""


class QueryExecutionError(ImportStatsError):
    """The statement failed or did not return exactly one row."""


class MissingColumnError(ImportStatsError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Result row is missing expected column: {column!r}")
