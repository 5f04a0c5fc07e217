"""Link-graph package: URL resolution, graph building and focus views.

Public re-exports so callers can write::

    from sitegraph.graph import build_graph, focus_graph
"""

from sitegraph.graph.builder import build_graph
from sitegraph.graph.degrees import compute_degrees
from sitegraph.graph.focus import focus_graph
from sitegraph.graph.memo import GraphMemo, GraphView
from sitegraph.graph.models import (
    AnalysisResult,
    CrawledPage,
    GraphEdge,
    GraphNode,
    GraphPayload,
    IssueRecord,
    LinkRef,
    Severity,
)
from sitegraph.graph.session import GraphSession
from sitegraph.graph.stats import summarize_graph
from sitegraph.graph.urls import build_url_index, normalize_url, resolve_internal_url

__all__ = [
    "AnalysisResult",
    "CrawledPage",
    "GraphEdge",
    "GraphMemo",
    "GraphNode",
    "GraphPayload",
    "GraphSession",
    "GraphView",
    "IssueRecord",
    "LinkRef",
    "Severity",
    "build_graph",
    "build_url_index",
    "compute_degrees",
    "focus_graph",
    "normalize_url",
    "resolve_internal_url",
    "summarize_graph",
]
