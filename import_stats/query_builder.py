"""SQL assembly for the multi-target freshness query.

Each target becomes an independent single-row derived table; the outer SELECT
cross-joins them so the whole run is answered by exactly one row.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence
from zoneinfo import ZoneInfo

from .targets import Target, TargetKind

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_SUBQUERY_TIMESTAMP = """\t(
\t\tSELECT {ref_epoch} - EXTRACT(epoch FROM MAX({column})) AS {alias}_delay{count}
\t\tFROM {table} WHERE {column} >= '{lower_bound}'
\t) AS {alias}"""

_SUBQUERY_INTEGER = """\t(
\t\tSELECT {ref_epoch} - MAX({column}) AS {alias}_delay{count}
\t\tFROM {table} WHERE {column} >= {lower_bound}
\t) AS {alias}"""


def _check_now(now: datetime) -> datetime:
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return now.replace(microsecond=0)


def _wall_clock_epoch(now: datetime, column_tz: str) -> tuple[int, datetime]:
    # EXTRACT(epoch FROM ts) reads a timestamp without time zone as UTC, so the
    # reference must be the wall clock of `now` in the column's zone, read as UTC.
    wall = now.astimezone(ZoneInfo(column_tz)).replace(tzinfo=None)
    return int(wall.replace(tzinfo=timezone.utc).timestamp()), wall


def build_subquery(
    target: Target,
    now: datetime,
    *,
    column_tz: str = "UTC",
    include_count: bool = False,
) -> str:
    now = _check_now(now)
    count = f", COUNT(*) AS {target.alias}_count" if include_count else ""

    if target.kind is TargetKind.TIMESTAMP:
        ref_epoch, wall = _wall_clock_epoch(now, column_tz)
        return _SUBQUERY_TIMESTAMP.format(
            ref_epoch=ref_epoch,
            column=target.column,
            table=target.table,
            alias=target.alias,
            count=count,
            lower_bound=(wall - target.offset).strftime(TIMESTAMP_FORMAT),
        )
    if target.kind is TargetKind.INTEGER:
        now_epoch = int(now.timestamp())
        return _SUBQUERY_INTEGER.format(
            ref_epoch=now_epoch,
            column=target.column,
            table=target.table,
            alias=target.alias,
            count=count,
            lower_bound=now_epoch - int(target.offset.total_seconds()),
        )
    raise ValueError(f"unsupported target kind: {target.kind!r}")


def expected_columns(targets: Sequence[Target], include_count: bool = False) -> list[str]:
    """Result column names in select-list order."""
    columns: list[str] = []
    for t in targets:
        columns.append(t.delay_column)
        if include_count:
            columns.append(t.count_column)
    return columns


def build_query(
    targets: Sequence[Target],
    now: datetime,
    *,
    column_tz: str = "UTC",
    include_count: bool = False,
) -> str:
    if not targets:
        raise ValueError("at least one target is required")

    select_list = []
    for t in targets:
        select_list.append(f"\t{t.alias}.{t.delay_column}")
        if include_count:
            select_list.append(f"\t{t.alias}.{t.count_column}")

    sub_queries = [
        build_subquery(t, now, column_tz=column_tz, include_count=include_count)
        for t in targets
    ]

    lines = [
        "SELECT",
        ",\n".join(select_list),
        "FROM",
        ",\n".join(sub_queries) + ";",
    ]
    return "\n".join(lines) + "\n"
