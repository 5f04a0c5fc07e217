"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from sitegraph.api import app

    uvicorn sitegraph.api:app --reload
"""

from sitegraph.api.app import app

__all__ = ["app"]
