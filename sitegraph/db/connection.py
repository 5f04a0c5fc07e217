"""SQLite connection factory for the analysis store.

Usage::

    from sitegraph.db.connection import get_connection

    conn = get_connection()
    rows = conn.execute("SELECT id FROM analyses").fetchall()
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from sitegraph.config import settings

_IN_MEMORY = ":memory:"


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open the analysis store.

    Cascading deletes rely on ``PRAGMA foreign_keys``, which SQLite leaves off
    per connection, so it is switched on here along with WAL journalling.

    Args:
        db_path: Database file, or ``":memory:"``.  Defaults to
            ``settings.db_path`` inside the workspace.

    Returns:
        A connection whose rows are :class:`sqlite3.Row` (access by column name).
    """
    path = db_path or settings.db_path
    if str(path) != _IN_MEMORY:
        settings.ensure_workspace()

    # The API shares one connection across its worker threads.
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")
    return conn
