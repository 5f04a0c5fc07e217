"""Dataclass models representing DB rows.

These are plain Python objects, not ORM models.  Full crawl content is read
back as :class:`sitegraph.graph.models.AnalysisResult`; this module holds the
lightweight listing rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AnalysisInfo:
    id: str
    url: Optional[str]
    created_at: int
    page_count: int
    issue_count: int
