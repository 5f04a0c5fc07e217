"""Schema setup for the analysis store.

:func:`init_db` can run on every start: ``schema.sql`` only uses
``IF NOT EXISTS`` and :func:`migrate` skips versions already recorded in
``schema_version``.
"""

from __future__ import annotations

import sqlite3

from sitegraph.config import settings

# (version, sql), applied in ascending order.  Append only.
MIGRATIONS: list[tuple[int, str]] = [
    (1, "CREATE INDEX IF NOT EXISTS idx_pages_url ON pages(analysis_id, url)"),
]


def init_db(conn: sqlite3.Connection) -> None:
    """Create the analysis tables, then apply pending migrations."""
    conn.executescript(settings.schema_path.read_text(encoding="utf-8"))
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version     INTEGER PRIMARY KEY,
                applied_at  INTEGER DEFAULT (unixepoch())
            )
            """
        )
    migrate(conn)


def current_version(conn: sqlite3.Connection) -> int:
    """Highest applied migration, ``0`` on a fresh database."""
    (version,) = conn.execute(
        "SELECT COALESCE(MAX(version), 0) FROM schema_version"
    ).fetchone()
    return version


def migrate(conn: sqlite3.Connection) -> None:
    applied = current_version(conn)
    for version, sql in MIGRATIONS:
        if version <= applied:
            continue
        with conn:
            conn.execute(sql)
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))
