"""Redistribution of the single result row into metric values."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Mapping, Sequence

from .exceptions import MissingColumnError
from .query_builder import expected_columns
from .targets import Target

logger = logging.getLogger(__name__)


def coerce_value(column: str, value: Any) -> float:
    # bool is an int subclass but never a valid delay/count.
    if isinstance(value, bool):
        logger.warning("unexpected_value column=%s type=bool, reporting 0", column)
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if value is None:
        logger.warning("null_value column=%s (no rows inside lookback window?), reporting 0", column)
        return 0.0
    logger.warning("unexpected_value column=%s type=%s, reporting 0", column, type(value).__name__)
    return 0.0


def map_result(
    row: Mapping[str, Any],
    targets: Sequence[Target],
    include_count: bool = False,
) -> dict[str, float]:
    """Map ``{column: backend value}`` to ``{metric key: float}``.

    Metric keys are the computed column names themselves (``<alias>_delay``,
    ``<alias>_count``); the output follows target order.
    """
    columns = expected_columns(targets, include_count)
    metrics: dict[str, float] = {}
    for column in columns:
        if column not in row:
            raise MissingColumnError(column)
        metrics[column] = coerce_value(column, row[column])

    extra = set(row.keys()) - set(columns)
    if extra:
        logger.debug("ignored_columns %s", sorted(extra))
    return metrics
