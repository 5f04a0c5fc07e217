"""Neighbourhood ("focus") view of a built graph."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from sitegraph.graph.models import DIMMED_COLOR, GraphPayload


def neighbours(payload: GraphPayload, node_id: str) -> tuple[list[str], list[str]]:
    """Distinct ``(incoming, outgoing)`` neighbour ids of *node_id*, in edge order."""
    incoming: dict[str, None] = {}
    outgoing: dict[str, None] = {}
    for edge in payload.edges:
        if edge.target == node_id:
            incoming[edge.source] = None
        if edge.source == node_id:
            outgoing[edge.target] = None
    return list(incoming), list(outgoing)


def focus_graph(payload: GraphPayload, selected_id: Optional[str]) -> GraphPayload:
    """Restrict edges to those touching *selected_id* and dim everything else.

    Nodes are never removed, only recoloured, so the renderer's node set
    stays stable while the user clicks around.  With no selection the input
    payload is returned as-is.  The input is never mutated.
    """
    if not selected_id:
        return payload

    edges = [
        e for e in payload.edges
        if e.source == selected_id or e.target == selected_id
    ]
    touched = {selected_id}
    for edge in edges:
        touched.add(edge.source)
        touched.add(edge.target)

    nodes = [
        n if n.id in touched else replace(n, color=DIMMED_COLOR, dimmed=True)
        for n in payload.nodes
    ]
    return GraphPayload(nodes=nodes, edges=edges)
