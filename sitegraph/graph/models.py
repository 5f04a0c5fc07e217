"""Dataclass models for crawl input and the derived link graph.

Input records (:class:`CrawledPage`, :class:`LinkRef`, :class:`IssueRecord`)
are owned by the crawl/audit engine and only read here.  :class:`GraphNode`,
:class:`GraphEdge` and :class:`GraphPayload` are derived and rebuilt from
scratch on every change; nothing here is mutated after construction.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from sitegraph.errors import InvalidAnalysisError

# ---------------------------------------------------------------------------
# Palette shared with the dashboard renderer
# ---------------------------------------------------------------------------
HEALTHY_COLOR = "#46c773ff"
WARNING_COLOR = "#e8aa3fff"
CRITICAL_COLOR = "#f14444ff"
DIMMED_COLOR = "#666666ff"
BROKEN_EDGE_COLOR = "#ff0000ff"
EDGE_COLOR = "#d5d2d2ff"

UNTITLED = "No Title"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Map an engine severity label onto :class:`Severity`.

        The audit engine emits ``suggestion`` for informational issues and
        some exports capitalise the label; anything unknown counts as info.
        """
        label = str(value or "").strip().lower()
        if label == "suggestion":
            return cls.INFO
        try:
            return cls(label)
        except ValueError:
            return cls.INFO


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------

@dataclass
class LinkRef:
    href: str
    is_internal: bool
    text: str = ""

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["LinkRef"]:
        if isinstance(raw, str):
            return cls(href=raw, is_internal=True) if raw else None
        if not isinstance(raw, dict):
            return None
        href = raw.get("href") or raw.get("url") or ""
        if not href:
            return None
        if "is_internal" in raw:
            internal = bool(raw["is_internal"])
        elif "is_external" in raw:
            internal = not raw["is_external"]
        else:
            internal = True
        return cls(href=str(href), is_internal=internal, text=str(raw.get("text") or ""))


@dataclass
class CrawledPage:
    url: str
    title: Optional[str] = None
    status_code: Optional[int] = None
    links: list[LinkRef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "CrawledPage":
        # detailed_links carries the internal/external flag; a bare "links"
        # list of strings is the fallback.
        raw_links = (
            raw.get("detailed_links")
            or raw.get("outbound_links")
            or raw.get("links")
            or []
        )
        links = [link for link in (LinkRef.from_dict(r) for r in raw_links) if link]
        return cls(
            url=str(raw["url"]),
            title=_as_text(raw.get("title")),
            status_code=_as_int(raw.get("status_code")),
            links=links,
        )


@dataclass
class IssueRecord:
    page_url: str
    severity: Severity
    title: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "IssueRecord":
        return cls(
            page_url=str(raw.get("page_url") or ""),
            severity=Severity.parse(raw.get("severity") or raw.get("issue_type")),
            title=str(raw.get("title") or ""),
        )


@dataclass
class AnalysisResult:
    """The crawl/audit output a graph is built from."""

    pages: list[CrawledPage] = field(default_factory=list)
    issues: list[IssueRecord] = field(default_factory=list)
    analysis_id: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "AnalysisResult":
        """Parse an engine JSON payload.

        Raises:
            InvalidAnalysisError: If *raw* is not an object with a ``pages`` list.
        """
        if not isinstance(raw, dict) or not isinstance(raw.get("pages"), list):
            raise InvalidAnalysisError("Analysis must be an object with a 'pages' list.")

        meta = raw.get("analysis") if isinstance(raw.get("analysis"), dict) else {}
        pages = [
            CrawledPage.from_dict(p)
            for p in raw["pages"]
            if isinstance(p, dict) and p.get("url")
        ]
        issues = [
            IssueRecord.from_dict(i)
            for i in raw.get("issues") or []
            if isinstance(i, dict)
        ]
        return cls(
            pages=pages,
            issues=issues,
            analysis_id=raw.get("analysis_id") or meta.get("id"),
            url=raw.get("url") or meta.get("url"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for issue in data["issues"]:
            issue["severity"] = Severity(issue["severity"]).value
        return data


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Derived graph
# ---------------------------------------------------------------------------

@dataclass
class GraphNode:
    id: str
    url: str
    title: str
    status_code: Optional[int]
    issue_count: int
    in_degree: int
    out_degree: int
    color: str
    size: float
    dimmed: bool = False


@dataclass
class GraphEdge:
    source: str
    target: str
    is_broken: bool


@dataclass
class GraphPayload:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[GraphNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the ``{nodes, edges}`` shape the renderer consumes."""
        return {
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [asdict(e) for e in self.edges],
        }
