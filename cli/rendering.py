"""Utilities for rendering link graphs in the CLI."""

from __future__ import annotations

from typing import List, Optional

from sitegraph.graph.models import GraphEdge, GraphNode, GraphPayload
from sitegraph.graph.stats import GraphStats, health_label

_HEALTH_ICONS = {
    "healthy": "🟢",
    "warning": "🟡",
    "critical": "🔴",
    "dimmed": "⚪",
}


def _icon(node: GraphNode) -> str:
    return _HEALTH_ICONS.get(health_label(node), "📦")


def _status(node: GraphNode) -> str:
    return str(node.status_code) if node.status_code is not None else "N/A"


def render_node_list(payload: GraphPayload) -> str:
    """One line per node: health, status, in/out degree, url."""
    lines = []
    for n in payload.nodes:
        lines.append(
            f"  {_icon(n)} [{_status(n)}] in={n.in_degree:<3} out={n.out_degree:<3} {n.url}"
        )
    return "\n".join(lines)


def render_focus(payload: GraphPayload, selected_id: str) -> str:
    """Render the edges around *selected_id* as a two-branch tree.

    Args:
        payload: A focused graph (see :func:`sitegraph.graph.focus.focus_graph`).
        selected_id: The node at the root of the tree.
    """
    node = payload.node(selected_id)
    if node is None:
        return "Selected node not found in graph."

    incoming: List[GraphEdge] = [e for e in payload.edges if e.target == selected_id]
    outgoing: List[GraphEdge] = [e for e in payload.edges if e.source == selected_id]

    lines = [f"{_icon(node)} {node.title} ({node.url})"]
    branches = [("← linked from", incoming, "source"), ("→ links to", outgoing, "target")]
    for b, (label, edges, end) in enumerate(branches):
        last_branch = b == len(branches) - 1
        lines.append(f"{'└── ' if last_branch else '├── '}{label} ({len(edges)})")
        prefix = "    " if last_branch else "│   "
        for i, edge in enumerate(edges):
            connector = "└── " if i == len(edges) - 1 else "├── "
            broken = " [BROKEN]" if edge.is_broken else ""
            lines.append(f"{prefix}{connector}{getattr(edge, end)}{broken}")
    return "\n".join(lines)


def render_node_detail(
    node: GraphNode,
    incoming: List[str],
    outgoing: List[str],
    page_index: Optional[int],
) -> str:
    """The selected-node panel: status, issues and link counts."""
    lines = [
        f"{_icon(node)} {node.title}",
        f"   URL      : {node.url}",
        f"   Status   : {_status(node)}",
        f"   Issues   : {node.issue_count}",
        f"   Incoming : {node.in_degree} links",
        f"   Outgoing : {node.out_degree} links",
    ]
    if page_index is not None:
        lines.append(f"   Page #   : {page_index}")
    if incoming:
        lines.append("\n   Linked from:")
        lines.extend(f"    - {url}" for url in incoming)
    if outgoing:
        lines.append("\n   Links to:")
        lines.extend(f"    - {url}" for url in outgoing)
    return "\n".join(lines)


def render_stats(stats: GraphStats, title: str = "Site graph") -> str:
    lines = [
        f"\n📊 {title}",
        "-" * 40,
        f"   Pages        : {stats.node_count}",
        f"   Links        : {stats.edge_count}",
        f"   Broken links : {stats.broken_edge_count}",
        f"   Self links   : {stats.self_loop_count}",
        f"   Orphans      : {len(stats.orphan_pages)}",
        f"   Dead ends    : {len(stats.dead_end_pages)}",
        "\n   Health:",
    ]
    for label, count in stats.health.items():
        lines.append(f"    {_HEALTH_ICONS[label]} {label}: {count}")
    if stats.top_hubs:
        lines.append("\n   Most linked pages:")
        for n in stats.top_hubs:
            lines.append(f"    {n.in_degree:>4}  {n.url}")
    return "\n".join(lines)
