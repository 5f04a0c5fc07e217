"""FastAPI application factory.

State
-----
``app.state.db``          one SQLite connection, schema initialised at startup
``app.state.graph_memo``  :class:`~sitegraph.graph.memo.GraphMemo` shared by
                          all graph endpoints, so unchanged analyses are
                          not rebuilt per request

Routers
-------
    /analyses  : import, list and delete stored crawl results; graph views
    /graph     : stateless graph build from a posted payload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitegraph.db import get_connection, init_db
from sitegraph.graph.memo import GraphMemo

from sitegraph.api.routers import analyses as analyses_router
from sitegraph.api.routers import graph as graph_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the store connection and graph cache for the app's lifetime."""
    conn = get_connection()
    init_db(conn)
    app.state.db = conn
    app.state.graph_memo = GraphMemo()
    try:
        yield
    finally:
        conn.close()


def create_app() -> FastAPI:
    """Build the app with both routers mounted."""
    app = FastAPI(
        title="SiteGraph API",
        description=(
            "Link-graph views over crawl/audit results: node and edge arrays "
            "for force-directed rendering, focus views around a selected page "
            "and topological statistics."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # The renderer runs in a browser webview on its own origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analyses_router.router, prefix="/analyses", tags=["analyses"])
    app.include_router(graph_router.router, prefix="/graph", tags=["graph"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn sitegraph.api.app:app --reload
app = create_app()
