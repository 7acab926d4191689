"""mackerel-agent plugin text output."""

from __future__ import annotations

import json
import os
from datetime import datetime
from typing import Mapping

from .exceptions import MissingColumnError
from .graphs import GraphDescriptor, graph_definition_payload

META_ENV = "MACKEREL_AGENT_PLUGIN_META"
META_HEADER = "# mackerel-agent-plugin"


def is_meta_request(environ: Mapping[str, str] | None = None) -> bool:
    if environ is None:
        environ = os.environ
    return environ.get(META_ENV, "") == "1"


def format_graph_definition(graphs: dict[str, GraphDescriptor], key_prefix: str) -> str:
    payload = graph_definition_payload(graphs, key_prefix)
    return META_HEADER + "\n" + json.dumps(payload)


def format_value(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_metric_lines(
    metrics: Mapping[str, float],
    graphs: dict[str, GraphDescriptor],
    key_prefix: str,
    now: datetime,
) -> list[str]:
    """One ``name\\tvalue\\tepoch`` line per metric, in graph order."""
    epoch = int(now.timestamp())
    lines: list[str] = []
    placed: set[str] = set()
    for graph in graphs.values():
        for key in graph.keys():
            if key not in metrics:
                raise MissingColumnError(key)
            lines.append(f"{key_prefix}.{graph.name}.{key}\t{format_value(metrics[key])}\t{epoch}")
            placed.add(key)

    orphans = set(metrics) - placed
    if orphans:
        raise ValueError(f"metrics without a graph: {sorted(orphans)}")
    return lines
