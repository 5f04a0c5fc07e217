"""Topological summary of a built link graph."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from sitegraph.graph.models import (
    CRITICAL_COLOR,
    HEALTHY_COLOR,
    WARNING_COLOR,
    GraphNode,
    GraphPayload,
)

_HEALTH_LABELS = {
    HEALTHY_COLOR: "healthy",
    WARNING_COLOR: "warning",
    CRITICAL_COLOR: "critical",
}


@dataclass
class GraphStats:
    node_count: int = 0
    edge_count: int = 0
    broken_edge_count: int = 0
    self_loop_count: int = 0
    orphan_pages: list[str] = field(default_factory=list)
    dead_end_pages: list[str] = field(default_factory=list)
    health: dict[str, int] = field(default_factory=dict)
    top_hubs: list[GraphNode] = field(default_factory=list)


def health_label(node: GraphNode) -> str:
    return _HEALTH_LABELS.get(node.color, "dimmed" if node.dimmed else "unknown")


def summarize_graph(payload: GraphPayload, top: Optional[int] = 10) -> GraphStats:
    """Count edges and classify pages of an unfocused graph.

    Orphans are pages nothing links to; dead ends are pages that link to no
    other crawled page.  Hubs are ranked by in-degree, ties by URL.
    """
    health = Counter(health_label(n) for n in payload.nodes)
    hubs = sorted(payload.nodes, key=lambda n: (-n.in_degree, n.id))
    if top is not None:
        hubs = hubs[:top]

    return GraphStats(
        node_count=len(payload.nodes),
        edge_count=len(payload.edges),
        broken_edge_count=sum(1 for e in payload.edges if e.is_broken),
        self_loop_count=sum(1 for e in payload.edges if e.source == e.target),
        orphan_pages=[n.id for n in payload.nodes if n.in_degree == 0],
        dead_end_pages=[n.id for n in payload.nodes if n.out_degree == 0],
        health={label: health.get(label, 0) for label in ("healthy", "warning", "critical")},
        top_hubs=[n for n in hubs if n.in_degree > 0],
    )
