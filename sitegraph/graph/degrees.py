"""In/out-degree tally over resolved internal links."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from sitegraph.graph.models import CrawledPage
from sitegraph.graph.urls import build_url_index, resolve_internal_url


@dataclass
class Degrees:
    in_degree: dict[str, int] = field(default_factory=dict)
    out_degree: dict[str, int] = field(default_factory=dict)


def iter_resolved_links(
    pages: Sequence[CrawledPage], index: dict[str, str]
) -> Iterator[tuple[str, str]]:
    """Yield ``(source_url, target_url)`` for every resolvable internal link.

    Order follows page order, then link order on the page.  Parallel links
    and self-links are yielded as-is.
    """
    for page in pages:
        for link in page.links:
            if not link.is_internal:
                continue
            target = resolve_internal_url(link.href, page.url, index)
            if target is not None:
                yield page.url, target


def compute_degrees(
    pages: Sequence[CrawledPage], index: Optional[dict[str, str]] = None
) -> Degrees:
    """Count resolved internal links into and out of every page.

    Every page gets an entry in both maps, so isolated pages read as zero
    rather than missing.
    """
    if index is None:
        index = build_url_index(pages)

    degrees = Degrees(
        in_degree={page.url: 0 for page in pages},
        out_degree={page.url: 0 for page in pages},
    )
    for source, target in iter_resolved_links(pages, index):
        degrees.out_degree[source] += 1
        degrees.in_degree[target] += 1
    return degrees
