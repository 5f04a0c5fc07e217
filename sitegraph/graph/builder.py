"""Build the ``{nodes, edges}`` link graph from crawl results."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Iterable, Optional, Sequence

from sitegraph.config import Settings, settings as default_settings
from sitegraph.graph.degrees import compute_degrees, iter_resolved_links
from sitegraph.graph.models import (
    CRITICAL_COLOR,
    HEALTHY_COLOR,
    UNTITLED,
    WARNING_COLOR,
    CrawledPage,
    GraphEdge,
    GraphNode,
    GraphPayload,
    IssueRecord,
    Severity,
)
from sitegraph.graph.urls import build_url_index, normalize_url

logger = logging.getLogger(__name__)


def node_color(issues: Iterable[IssueRecord]) -> str:
    """Colour a page by its worst issue: critical, then warning, else healthy."""
    severities = {issue.severity for issue in issues}
    if Severity.CRITICAL in severities:
        return CRITICAL_COLOR
    if Severity.WARNING in severities:
        return WARNING_COLOR
    return HEALTHY_COLOR


def node_size(in_degree: int, base: float = 2.0, scale: float = 2.0) -> float:
    # Log scale keeps hub pages from swamping the layout.
    return base + math.log(in_degree + 1) * scale


def is_error_status(status_code: Optional[int], threshold: int = 400) -> bool:
    return status_code is not None and status_code >= threshold


def unique_pages(pages: Iterable[CrawledPage]) -> list[CrawledPage]:
    """Drop exact repeats of an already-seen page URL, keeping the first."""
    seen: set[str] = set()
    result: list[CrawledPage] = []
    for page in pages:
        if page.url in seen:
            logger.debug("Skipping repeated page record for %r", page.url)
            continue
        seen.add(page.url)
        result.append(page)
    return result


def build_graph(
    pages: Sequence[CrawledPage],
    issues: Sequence[IssueRecord],
    config: Optional[Settings] = None,
) -> GraphPayload:
    """Return one node per crawled page and one edge per resolved internal link.

    Args:
        pages: Crawled pages, in crawl order.  Output order follows it.
        issues: Audit issues; matched to pages by normalised ``page_url``.
        config: Size/brokenness parameters.  Defaults to the global settings.
    """
    config = config or default_settings
    pages = unique_pages(pages)
    index = build_url_index(pages)
    degrees = compute_degrees(pages, index)

    issues_by_page: dict[str, list[IssueRecord]] = defaultdict(list)
    for issue in issues:
        issues_by_page[normalize_url(issue.page_url)].append(issue)

    nodes: list[GraphNode] = []
    status_by_url: dict[str, Optional[int]] = {}
    for page in pages:
        page_issues = issues_by_page.get(normalize_url(page.url), [])
        in_degree = degrees.in_degree[page.url]
        status_by_url[page.url] = page.status_code
        nodes.append(
            GraphNode(
                id=page.url,
                url=page.url,
                title=page.title or UNTITLED,
                status_code=page.status_code,
                issue_count=len(page_issues),
                in_degree=in_degree,
                out_degree=degrees.out_degree[page.url],
                color=node_color(page_issues),
                size=node_size(in_degree, config.node_size_base, config.node_size_scale),
            )
        )

    edges = [
        GraphEdge(
            source=source,
            target=target,
            is_broken=is_error_status(status_by_url[target], config.broken_status_threshold),
        )
        for source, target in iter_resolved_links(pages, index)
    ]

    logger.debug("Built graph: %d nodes, %d edges", len(nodes), len(edges))
    return GraphPayload(nodes=nodes, edges=edges)
