"""One fetch cycle: build, execute, map, print."""

from __future__ import annotations

import logging
import sys
import time
from datetime import datetime, timezone
from typing import TextIO

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from common.config import Settings
from common.db import get_engine

from .config import StatsConfig
from .exceptions import DatabaseConnectionError, QueryExecutionError
from .graphs import build_graph_definitions
from .query_builder import build_query
from .reporter import format_metric_lines
from .result_mapper import map_result

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def fetch_metrics(engine: Engine, cfg: StatsConfig, now: datetime) -> dict[str, float]:
    """Execute the composed query once and map its single row.

    No retries: a failure aborts the cycle and nothing is reported.
    """
    query = build_query(
        cfg.targets, now, column_tz=cfg.column_tz, include_count=cfg.include_count,
    )
    logger.debug("query:\n%s", query)

    t0 = time.monotonic()
    try:
        conn = engine.connect()
    except SQLAlchemyError as e:
        logger.error("Failed FetchMetrics: connect: %s", e)
        raise DatabaseConnectionError(str(e)) from e

    with conn:
        try:
            rows = conn.execute(text(query)).mappings().all()
        except SQLAlchemyError as e:
            logger.error("Failed FetchMetrics: execute: %s", e)
            raise QueryExecutionError(str(e)) from e

    if len(rows) != 1:
        raise QueryExecutionError(f"expected exactly one row, got {len(rows)}")

    metrics = map_result(rows[0], cfg.targets, include_count=cfg.include_count)
    logger.info(
        "fetch_cycle ms=%.1f targets=%d metrics=%d",
        (time.monotonic() - t0) * 1000, len(cfg.targets), len(metrics),
    )
    return metrics


def run_once(
    cfg: StatsConfig,
    settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    now: datetime | None = None,
    out: TextIO | None = None,
) -> int:
    """Run a single cycle and print metric lines; returns the number printed."""
    if out is None:
        out = sys.stdout
    if now is None:
        now = utc_now()
    if engine is None:
        try:
            engine = get_engine(settings)
        except (SQLAlchemyError, ImportError) as e:
            # Unknown dialect or missing DBAPI module.
            logger.error("Failed FetchMetrics: create engine: %s", e)
            raise DatabaseConnectionError(str(e)) from e

    metrics = fetch_metrics(engine, cfg, now)
    graphs = build_graph_definitions(
        cfg.targets, prefix=cfg.key_prefix, include_count=cfg.include_count,
    )
    # Format everything first so a failure never leaves partial output.
    lines = format_metric_lines(metrics, graphs, cfg.key_prefix, now)
    for line in lines:
        print(line, file=out)
    return len(lines)
