"""Operations on the ``analyses``, ``pages``, ``links`` and ``issues`` tables.

The store is the source of truth graphs are rebuilt from; no graph state is
ever persisted.  Page, link and issue order are kept via ``position``
columns so a rebuild from the store matches a rebuild from the original
payload exactly.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from time import time
from typing import Optional

from sitegraph.db.models import AnalysisInfo
from sitegraph.errors import AnalysisNotFoundError
from sitegraph.graph.models import (
    AnalysisResult,
    CrawledPage,
    IssueRecord,
    LinkRef,
    Severity,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_info(row: sqlite3.Row) -> AnalysisInfo:
    return AnalysisInfo(
        id=row["id"],
        url=row["url"],
        created_at=row["created_at"],
        page_count=row["page_count"],
        issue_count=row["issue_count"],
    )


_INFO_SELECT = """
    SELECT a.id, a.url, a.created_at,
           (SELECT COUNT(*) FROM pages  p WHERE p.analysis_id = a.id) AS page_count,
           (SELECT COUNT(*) FROM issues i WHERE i.analysis_id = a.id) AS issue_count
    FROM   analyses a
"""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def save_analysis(
    conn: sqlite3.Connection,
    result: AnalysisResult,
    analysis_id: Optional[str] = None,
) -> str:
    """Store *result* and return its id.

    An existing analysis with the same id is replaced wholesale.

    Args:
        conn: Open DB connection.
        result: Parsed crawl/audit output.
        analysis_id: Explicit id; falls back to ``result.analysis_id``, then
            a new UUID.
    """
    aid = analysis_id or result.analysis_id or str(uuid.uuid4())
    now = int(time())

    with conn:
        conn.execute("DELETE FROM analyses WHERE id = ?", (aid,))
        conn.execute(
            "INSERT INTO analyses (id, url, created_at) VALUES (?, ?, ?)",
            (aid, result.url, now),
        )
        conn.executemany(
            """
            INSERT INTO pages (analysis_id, position, url, title, status_code)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                (aid, pos, p.url, p.title, p.status_code)
                for pos, p in enumerate(result.pages)
            ],
        )
        conn.executemany(
            """
            INSERT INTO links (analysis_id, page_position, position, href, is_internal, text)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (aid, page_pos, pos, link.href, int(link.is_internal), link.text)
                for page_pos, p in enumerate(result.pages)
                for pos, link in enumerate(p.links)
            ],
        )
        conn.executemany(
            """
            INSERT INTO issues (analysis_id, position, page_url, severity, title)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                (aid, pos, i.page_url, i.severity.value, i.title)
                for pos, i in enumerate(result.issues)
            ],
        )

    logger.info(
        "Stored analysis %s (%d pages, %d issues)",
        aid, len(result.pages), len(result.issues),
    )
    return aid


def load_analysis(conn: sqlite3.Connection, analysis_id: str) -> Optional[AnalysisResult]:
    """Rebuild the :class:`AnalysisResult` stored under *analysis_id*.

    Returns ``None`` if the id is unknown.
    """
    meta = conn.execute(
        "SELECT id, url FROM analyses WHERE id = ?", (analysis_id,)
    ).fetchone()
    if meta is None:
        return None

    page_rows = conn.execute(
        "SELECT * FROM pages WHERE analysis_id = ? ORDER BY position",
        (analysis_id,),
    ).fetchall()
    link_rows = conn.execute(
        "SELECT * FROM links WHERE analysis_id = ? ORDER BY page_position, position",
        (analysis_id,),
    ).fetchall()
    issue_rows = conn.execute(
        "SELECT * FROM issues WHERE analysis_id = ? ORDER BY position",
        (analysis_id,),
    ).fetchall()

    links_by_page: dict[int, list[LinkRef]] = {}
    for r in link_rows:
        links_by_page.setdefault(r["page_position"], []).append(
            LinkRef(href=r["href"], is_internal=bool(r["is_internal"]), text=r["text"])
        )

    pages = [
        CrawledPage(
            url=r["url"],
            title=r["title"],
            status_code=r["status_code"],
            links=links_by_page.get(r["position"], []),
        )
        for r in page_rows
    ]
    issues = [
        IssueRecord(page_url=r["page_url"], severity=Severity(r["severity"]), title=r["title"])
        for r in issue_rows
    ]
    return AnalysisResult(
        pages=pages, issues=issues, analysis_id=meta["id"], url=meta["url"]
    )


def require_analysis(conn: sqlite3.Connection, analysis_id: str) -> AnalysisResult:
    """Like :func:`load_analysis` but raises for an unknown id.

    Raises:
        AnalysisNotFoundError: If no analysis is stored under *analysis_id*.
    """
    result = load_analysis(conn, analysis_id)
    if result is None:
        raise AnalysisNotFoundError(analysis_id)
    return result


def get_analysis_info(conn: sqlite3.Connection, analysis_id: str) -> Optional[AnalysisInfo]:
    """Fetch listing metadata for one analysis.  Returns ``None`` if not found."""
    row = conn.execute(_INFO_SELECT + " WHERE a.id = ?", (analysis_id,)).fetchone()
    return _row_to_info(row) if row else None


def list_analyses(conn: sqlite3.Connection) -> list[AnalysisInfo]:
    """Return all stored analyses, newest first."""
    rows = conn.execute(_INFO_SELECT + " ORDER BY a.created_at DESC, a.id").fetchall()
    return [_row_to_info(r) for r in rows]


def delete_analysis(conn: sqlite3.Connection, analysis_id: str) -> bool:
    """Delete an analysis and all its rows (via CASCADE).

    Returns ``True`` if a row was deleted.
    """
    with conn:
        cursor = conn.execute("DELETE FROM analyses WHERE id = ?", (analysis_id,))
    return cursor.rowcount > 0
