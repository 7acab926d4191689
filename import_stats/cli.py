"""CLI entry point for the import-stats plugin."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Sequence

from common.config import Settings, get_settings

from .config import DEFAULT_PREFIX, StatsConfig
from .exceptions import ImportStatsError, TargetSpecError
from .graphs import build_graph_definitions
from .reporter import format_graph_definition, is_meta_request
from .runner import run_once
from .targets import parse_targets

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_USAGE = 3

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TARGET_HELP = (
    "Target table (multiple allowed). Format: table:column:type[:offset]. "
    "type is 'timestamp' or 'integer'; offset is the lookback window in hours "
    "(default 24)."
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="import-stats",
        description="Report data-freshness delay of database tables as mackerel metrics",
    )
    p.add_argument("-H", "--host", help="database endpoint")
    p.add_argument("-d", "--database", help="database name")
    p.add_argument("-p", "--port", type=int, help="port number (default 5439)")
    p.add_argument("-u", "--user", help="user name")
    p.add_argument("-P", "--password", help="password")
    p.add_argument("--sslmode", help="libpq sslmode (default verify-full)")
    p.add_argument(
        "-t", "--target", dest="targets", action="append", required=True,
        metavar="TABLE:COLUMN:TYPE[:OFFSET]", help=TARGET_HELP,
    )
    p.add_argument("--prefix", default=DEFAULT_PREFIX, help="metric key prefix")
    p.add_argument("--with-count", action="store_true", help="also report row counts inside the window")
    p.add_argument(
        "--column-timezone", default="UTC",
        help="timezone of the wall-clock values stored in timestamp columns",
    )
    p.add_argument(
        "--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS,
        help="logging level (stderr)",
    )
    return p


def _settings_from_args(args: argparse.Namespace, base: Settings) -> Settings:
    overrides = {
        "db_host": args.host,
        "db_port": args.port,
        "db_user": args.user,
        "db_password": args.password,
        "db_name": args.database,
        "sslmode": args.sslmode,
    }
    return dataclasses.replace(base, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # stdout carries metrics; logs go to stderr.
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        targets = parse_targets(args.targets)
        cfg = StatsConfig(
            targets=tuple(targets),
            prefix=args.prefix,
            include_count=args.with_count,
            column_tz=args.column_timezone,
        )
    except (TargetSpecError, ValueError) as e:
        print(f"Failed Parse Targets: {e}", file=sys.stderr)
        return EXIT_USAGE

    if is_meta_request():
        graphs = build_graph_definitions(
            cfg.targets, prefix=cfg.key_prefix, include_count=cfg.include_count,
        )
        print(format_graph_definition(graphs, cfg.key_prefix))
        return EXIT_OK

    settings = _settings_from_args(args, get_settings())
    try:
        run_once(cfg, settings)
    except ImportStatsError as e:
        logger.error("fetch_failed err=%s", e)
        return EXIT_RUNTIME_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
