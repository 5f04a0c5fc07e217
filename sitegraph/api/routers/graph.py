"""Stateless graph endpoint.

Routes
------
POST /graph?selected=<url>    Build nodes + edges from a posted analysis payload
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, Request

from sitegraph.api.schemas import GraphResponse, graph_response
from sitegraph.errors import InvalidAnalysisError
from sitegraph.graph.models import AnalysisResult

router = APIRouter()


@router.post("", response_model=GraphResponse)
def build(
    request: Request,
    body: dict[str, Any] = Body(...),
    selected: Optional[str] = None,
) -> dict[str, Any]:
    """Build the link graph for a payload that is not stored."""
    try:
        result = AnalysisResult.from_dict(body)
    except InvalidAnalysisError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    view = request.app.state.graph_memo.build(result, selected)
    if selected and view.base.node(selected) is None:
        raise HTTPException(status_code=404, detail=f"Node not found: {selected!r}")
    return graph_response(view)
