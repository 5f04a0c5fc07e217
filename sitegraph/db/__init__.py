"""Database layer package.

Public re-exports so callers can write::

    from sitegraph.db import get_connection, init_db
"""

from sitegraph.db.connection import get_connection
from sitegraph.db.migrations import init_db

__all__ = ["get_connection", "init_db"]
