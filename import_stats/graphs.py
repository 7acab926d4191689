"""Static graph/metric descriptors for the reporting agent."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from .targets import Target

UNIT_INTEGER = "integer"

DELAY_GRAPH = "delay"
COUNT_GRAPH = "count"

_SEPARATORS = re.compile(r"[._\-]+")


@dataclass(frozen=True)
class MetricDescriptor:
    key: str
    label: str


@dataclass(frozen=True)
class GraphDescriptor:
    name: str
    label: str
    unit: str = UNIT_INTEGER
    metrics: tuple[MetricDescriptor, ...] = field(default_factory=tuple)

    def keys(self) -> list[str]:
        return [m.key for m in self.metrics]


def alias_label(alias: str) -> str:
    """``public_orders`` -> ``Public Orders``."""
    return _SEPARATORS.sub(" ", alias).strip().title()


def build_graph_definitions(
    targets: Sequence[Target],
    *,
    prefix: str = "import-stats",
    include_count: bool = False,
) -> dict[str, GraphDescriptor]:
    label_prefix = alias_label(prefix)

    graphs = {
        DELAY_GRAPH: GraphDescriptor(
            name=DELAY_GRAPH,
            label=f"{label_prefix} Delay",
            metrics=tuple(
                MetricDescriptor(key=t.delay_column, label=alias_label(t.alias))
                for t in targets
            ),
        )
    }
    if include_count:
        graphs[COUNT_GRAPH] = GraphDescriptor(
            name=COUNT_GRAPH,
            label=f"{label_prefix} Count",
            metrics=tuple(
                MetricDescriptor(key=t.count_column, label=alias_label(t.alias))
                for t in targets
            ),
        )
    return graphs


def graph_definition_payload(graphs: dict[str, GraphDescriptor], key_prefix: str) -> dict:
    """JSON-ready structure expected by mackerel-agent on plugin meta requests."""
    return {
        "graphs": {
            f"{key_prefix}.{g.name}": {
                "label": g.label,
                "unit": g.unit,
                "metrics": [
                    {"name": m.key, "label": m.label, "stacked": False}
                    for m in g.metrics
                ],
            }
            for g in graphs.values()
        }
    }
