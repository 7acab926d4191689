"""import-stats — data-freshness metrics plugin.

Modules:
- targets: table:column:type[:offset] parser
- query_builder: single-statement freshness query
- result_mapper: result row -> metric values
- graphs: graph/metric descriptors
- reporter: mackerel-agent plugin output
- runner: one fetch cycle (run_once)
- cli: CLI entry point (main)
"""

from .config import StatsConfig
from .targets import Target, TargetKind, parse_target, parse_targets
from .query_builder import build_query
from .result_mapper import map_result
from .graphs import build_graph_definitions
from .runner import fetch_metrics, run_once
from .cli import main

__all__ = [
    "StatsConfig",
    "Target",
    "TargetKind",
    "parse_target",
    "parse_targets",
    "build_query",
    "map_result",
    "build_graph_definitions",
    "fetch_metrics",
    "run_once",
    "main",
]
