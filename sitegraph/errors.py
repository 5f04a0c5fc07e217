"""Exceptions raised at the edges of the graph core (store, API, session)."""

from __future__ import annotations


class SiteGraphError(Exception):
    """Base class for all SiteGraph errors."""


class InvalidAnalysisError(SiteGraphError):
    """The analysis payload is not shaped like a crawl/audit result."""


class AnalysisNotFoundError(SiteGraphError):
    def __init__(self, analysis_id: str):
        self.analysis_id = analysis_id
        super().__init__(f"Analysis not found: {analysis_id!r}")


class NodeNotFoundError(SiteGraphError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id!r}")
