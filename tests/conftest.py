"""Shared fixtures."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine, text

from import_stats.targets import parse_targets

# 2024-01-01T00:00:00Z
NOW_EPOCH = 1704067200


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def scenario_targets():
    return parse_targets(["orders:updated_at:timestamp", "events:ts:integer:6"])


@pytest.fixture
def sqlite_engine():
    """In-memory engine with integer-epoch tables.

    events: two rows inside a 6h window, one outside.
    loads: nothing inside a 1h window.
    """
    engine = create_engine("sqlite://", future=True)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE events (id INTEGER PRIMARY KEY, ts INTEGER)"))
        conn.execute(text("CREATE TABLE loads (id INTEGER PRIMARY KEY, loaded_at INTEGER)"))
        conn.execute(
            text("INSERT INTO events (ts) VALUES (:a), (:b), (:c)"),
            {"a": NOW_EPOCH - 120, "b": NOW_EPOCH - 3600, "c": NOW_EPOCH - 86400},
        )
        conn.execute(
            text("INSERT INTO loads (loaded_at) VALUES (:a)"),
            {"a": NOW_EPOCH - 7200},
        )
    yield engine
    engine.dispose()
