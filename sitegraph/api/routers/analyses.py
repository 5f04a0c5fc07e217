"""Endpoints for stored analyses and their link graphs.

Routes
------
POST   /analyses                                 Import a crawl/audit result
GET    /analyses                                 List stored analyses
GET    /analyses/{id}                            Analysis metadata
DELETE /analyses/{id}                            Delete an analysis
GET    /analyses/{id}/graph?selected=<url>       Nodes + edges (focus optional)
GET    /analyses/{id}/graph/stats                Topological summary
GET    /analyses/{id}/graph/nodes/{node_id}      Selected-node detail
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, Request, Response

from sitegraph.api.schemas import (
    AnalysisInfoResponse,
    GraphResponse,
    NodeDetailResponse,
    StatsResponse,
    graph_response,
)
from sitegraph.config import settings
from sitegraph.db.models import AnalysisInfo
from sitegraph.db.results import (
    delete_analysis,
    get_analysis_info,
    list_analyses,
    require_analysis,
    save_analysis,
)
from sitegraph.errors import AnalysisNotFoundError, InvalidAnalysisError, NodeNotFoundError
from sitegraph.graph.focus import neighbours
from sitegraph.graph.memo import GraphView
from sitegraph.graph.models import AnalysisResult
from sitegraph.graph.session import GraphSession
from sitegraph.graph.stats import summarize_graph

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _info_response(info: AnalysisInfo) -> dict[str, Any]:
    return asdict(info)


def _load_or_404(request: Request, analysis_id: str) -> AnalysisResult:
    try:
        return require_analysis(request.app.state.db, analysis_id)
    except AnalysisNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _view_or_404(
    request: Request, result: AnalysisResult, selected: Optional[str] = None
) -> GraphView:
    """One memoised build per request; ``selected`` must name a node."""
    view = request.app.state.graph_memo.build(result, selected)
    if selected and view.base.node(selected) is None:
        raise HTTPException(status_code=404, detail=str(NodeNotFoundError(selected)))
    return view


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=AnalysisInfoResponse, status_code=201)
def create(
    request: Request,
    body: dict[str, Any] = Body(...),
    id: Optional[str] = None,
) -> dict[str, Any]:
    """Import a crawl/audit result."""
    conn = request.app.state.db
    try:
        result = AnalysisResult.from_dict(body)
    except InvalidAnalysisError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    analysis_id = save_analysis(conn, result, analysis_id=id)
    return _info_response(get_analysis_info(conn, analysis_id))


@router.get("", response_model=list[AnalysisInfoResponse])
def list_all(request: Request) -> list[dict[str, Any]]:
    """Return all stored analyses, newest first."""
    return [_info_response(i) for i in list_analyses(request.app.state.db)]


@router.get("/{analysis_id}", response_model=AnalysisInfoResponse)
def get_one(analysis_id: str, request: Request) -> dict[str, Any]:
    info = get_analysis_info(request.app.state.db, analysis_id)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Analysis not found: {analysis_id!r}")
    return _info_response(info)


@router.delete("/{analysis_id}")
def remove(analysis_id: str, request: Request) -> Response:
    """Delete an analysis and all its pages, links and issues."""
    delete_analysis(request.app.state.db, analysis_id)
    return Response(status_code=204)


@router.get("/{analysis_id}/graph", response_model=GraphResponse)
def analysis_graph(
    analysis_id: str, request: Request, selected: Optional[str] = None
) -> dict[str, Any]:
    """Return nodes and edges; with ``selected`` only that node's edges remain."""
    result = _load_or_404(request, analysis_id)
    return graph_response(_view_or_404(request, result, selected))


@router.get("/{analysis_id}/graph/stats", response_model=StatsResponse)
def analysis_stats(
    analysis_id: str, request: Request, top: int = settings.top_hubs
) -> dict[str, Any]:
    view = _view_or_404(request, _load_or_404(request, analysis_id))
    stats = summarize_graph(view.base, top=top)
    return {
        "node_count": stats.node_count,
        "edge_count": stats.edge_count,
        "broken_edge_count": stats.broken_edge_count,
        "self_loop_count": stats.self_loop_count,
        "orphan_pages": stats.orphan_pages,
        "dead_end_pages": stats.dead_end_pages,
        "health": stats.health,
        "top_hubs": [asdict(n) for n in stats.top_hubs],
    }


@router.get("/{analysis_id}/graph/nodes/{node_id:path}", response_model=NodeDetailResponse)
def analysis_node(analysis_id: str, node_id: str, request: Request) -> dict[str, Any]:
    """Selected-node panel: status, degrees, neighbours and page index."""
    result = _load_or_404(request, analysis_id)
    view = _view_or_404(request, result, node_id)
    incoming, outgoing = neighbours(view.base, node_id)
    return {
        "node": asdict(view.base.node(node_id)),
        "page_index": GraphSession(result).page_index(node_id),
        "incoming": incoming,
        "outgoing": outgoing,
    }
