"""Pydantic schemas shared by the API routers."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from sitegraph.graph.memo import GraphView


class AnalysisInfoResponse(BaseModel):
    id: str
    url: Optional[str]
    created_at: int
    page_count: int
    issue_count: int


class NodeResponse(BaseModel):
    id: str
    url: str
    title: str
    status_code: Optional[int]
    issue_count: int
    in_degree: int
    out_degree: int
    color: str
    size: float
    dimmed: bool


class EdgeResponse(BaseModel):
    source: str
    target: str
    is_broken: bool


class GraphResponse(BaseModel):
    nodes: list[NodeResponse]
    edges: list[EdgeResponse]
    fingerprint: str
    selected: Optional[str] = None


class NodeDetailResponse(BaseModel):
    node: NodeResponse
    page_index: Optional[int]
    incoming: list[str]
    outgoing: list[str]


class StatsResponse(BaseModel):
    node_count: int
    edge_count: int
    broken_edge_count: int
    self_loop_count: int
    orphan_pages: list[str]
    dead_end_pages: list[str]
    health: dict[str, int]
    top_hubs: list[NodeResponse]


def graph_response(view: GraphView) -> dict[str, Any]:
    """Serialise a :class:`~sitegraph.graph.memo.GraphView`."""
    return {
        **view.payload.to_dict(),
        "fingerprint": view.fingerprint,
        "selected": view.selected_id,
    }
