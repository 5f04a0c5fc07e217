"""Tests for degree calculation, graph building and focus views."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from sitegraph.config import Settings
from sitegraph.graph.builder import build_graph, node_color, node_size
from sitegraph.graph.degrees import compute_degrees
from sitegraph.graph.focus import focus_graph, neighbours
from sitegraph.graph.models import (
    CRITICAL_COLOR,
    DIMMED_COLOR,
    HEALTHY_COLOR,
    WARNING_COLOR,
    CrawledPage,
    GraphEdge,
    GraphPayload,
    IssueRecord,
    LinkRef,
    Severity,
)


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

def _page(url: str, *hrefs: str, status: int | None = 200, title: str | None = "T") -> CrawledPage:
    return CrawledPage(
        url=url,
        title=title,
        status_code=status,
        links=[LinkRef(href=h, is_internal=True) for h in hrefs],
    )


@pytest.fixture()
def site() -> list[CrawledPage]:
    """A small site: home hub, two sections, one broken page, one orphan."""
    return [
        _page("https://a.com/", "/blog", "/about", "https://a.com/missing", "https://ext.com/"),
        _page("https://a.com/blog/", "https://a.com/", "/blog/post-1", "/blog/post-1"),
        _page("https://a.com/about", "https://a.com/"),
        _page("https://a.com/blog/post-1", "/gone"),
        _page("https://a.com/gone", status=404),
        _page("https://a.com/orphan"),
    ]


def _assert_degree_invariant(payload: GraphPayload) -> None:
    for node in payload.nodes:
        assert node.in_degree == sum(1 for e in payload.edges if e.target == node.id)
        assert node.out_degree == sum(1 for e in payload.edges if e.source == node.id)


# ---------------------------------------------------------------------------
# compute_degrees
# ---------------------------------------------------------------------------

class TestComputeDegrees:
    def test_every_page_has_zeroed_entry(self) -> None:
        degrees = compute_degrees([_page("https://a.com/x"), _page("https://a.com/y")])
        assert degrees.in_degree == {"https://a.com/x": 0, "https://a.com/y": 0}
        assert degrees.out_degree == {"https://a.com/x": 0, "https://a.com/y": 0}

    def test_counts_resolved_links_only(self, site: list[CrawledPage]) -> None:
        degrees = compute_degrees(site)
        assert degrees.out_degree["https://a.com/"] == 2  # /missing and ext.com dropped
        assert degrees.in_degree["https://a.com/"] == 2
        assert degrees.in_degree["https://a.com/blog/post-1"] == 2
        assert degrees.in_degree["https://a.com/orphan"] == 0

    def test_external_flag_excludes_link(self) -> None:
        pages = [
            CrawledPage(url="https://a.com/", links=[LinkRef("https://a.com/x", is_internal=False)]),
            _page("https://a.com/x"),
        ]
        degrees = compute_degrees(pages)
        assert degrees.out_degree["https://a.com/"] == 0
        assert degrees.in_degree["https://a.com/x"] == 0


# ---------------------------------------------------------------------------
# build_graph
# ---------------------------------------------------------------------------

class TestBuildGraph:
    def test_scenario_broken_target(self) -> None:
        pages = [
            _page("https://a.com/", "https://a.com/b", status=200),
            _page("https://a.com/b", status=404),
        ]
        payload = build_graph(pages, [])

        assert len(payload.nodes) == 2
        assert payload.edges == [
            GraphEdge(source="https://a.com/", target="https://a.com/b", is_broken=True)
        ]
        assert payload.node("https://a.com/b").in_degree == 1
        assert payload.node("https://a.com/").out_degree == 1

    def test_self_loop_kept(self) -> None:
        payload = build_graph([_page("https://a.com/x", "https://a.com/x", status=500)], [])
        assert payload.edges == [
            GraphEdge(source="https://a.com/x", target="https://a.com/x", is_broken=True)
        ]
        node = payload.node("https://a.com/x")
        assert node.in_degree == 1
        assert node.out_degree == 1

    def test_self_loop_healthy_page_not_broken(self) -> None:
        payload = build_graph([_page("https://a.com/x", "/x", status=200)], [])
        assert payload.edges[0].is_broken is False

    def test_relative_link_resolves(self) -> None:
        payload = build_graph(
            [_page("https://a.com/x", "/about"), _page("https://a.com/about")], []
        )
        assert [(e.source, e.target) for e in payload.edges] == [
            ("https://a.com/x", "https://a.com/about")
        ]

    def test_parallel_links_preserved(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        parallel = [
            e for e in payload.edges
            if e.source == "https://a.com/blog/" and e.target == "https://a.com/blog/post-1"
        ]
        assert len(parallel) == 2

    def test_one_node_per_page_in_order(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        assert [n.id for n in payload.nodes] == [p.url for p in site]

    def test_edges_only_reference_existing_nodes(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        ids = {n.id for n in payload.nodes}
        assert all(e.source in ids and e.target in ids for e in payload.edges)

    def test_degree_invariant(self, site: list[CrawledPage]) -> None:
        _assert_degree_invariant(build_graph(site, []))

    def test_deterministic(self, site: list[CrawledPage]) -> None:
        issues = [IssueRecord("https://a.com/about", Severity.WARNING)]
        first = build_graph(site, issues)
        second = build_graph(list(site), list(issues))
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_broken_only_for_error_status(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        broken = [(e.source, e.target) for e in payload.edges if e.is_broken]
        assert broken == [("https://a.com/blog/post-1", "https://a.com/gone")]

    def test_unknown_status_is_not_broken(self) -> None:
        payload = build_graph(
            [_page("https://a.com/", "/x"), _page("https://a.com/x", status=None)], []
        )
        assert payload.edges[0].is_broken is False

    def test_threshold_is_configurable(self) -> None:
        config = Settings(broken_status_threshold=300)
        payload = build_graph(
            [_page("https://a.com/", "/x"), _page("https://a.com/x", status=301)], [], config
        )
        assert payload.edges[0].is_broken is True

    def test_unparseable_link_is_dropped(self) -> None:
        pages = [
            _page("https://a.com/", "http://[::1", "/x"),
            _page("https://a.com/x"),
        ]
        payload = build_graph(pages, [])
        assert [(e.source, e.target) for e in payload.edges] == [
            ("https://a.com/", "https://a.com/x")
        ]
        assert payload.node("https://a.com/").out_degree == 1

    def test_empty_input(self) -> None:
        assert build_graph([], []) == GraphPayload()

    def test_missing_title_placeholder(self) -> None:
        payload = build_graph([_page("https://a.com/", title=None)], [])
        assert payload.nodes[0].title == "No Title"

    def test_repeated_page_record_yields_one_node(self) -> None:
        payload = build_graph([_page("https://a.com/"), _page("https://a.com/")], [])
        assert len(payload.nodes) == 1

    def test_issue_colours_and_counts(self, site: list[CrawledPage]) -> None:
        issues = [
            IssueRecord("https://a.com/about", Severity.WARNING),
            IssueRecord("https://a.com/about", Severity.CRITICAL),
            IssueRecord("https://a.com/blog", Severity.WARNING),  # matches /blog/
            IssueRecord("https://a.com/orphan", Severity.INFO),
        ]
        payload = build_graph(site, issues)
        assert payload.node("https://a.com/about").color == CRITICAL_COLOR
        assert payload.node("https://a.com/about").issue_count == 2
        assert payload.node("https://a.com/blog/").color == WARNING_COLOR
        assert payload.node("https://a.com/orphan").color == HEALTHY_COLOR
        assert payload.node("https://a.com/orphan").issue_count == 1
        assert payload.node("https://a.com/").color == HEALTHY_COLOR

    def test_node_size_is_logarithmic(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        assert payload.node("https://a.com/orphan").size == 2.0
        assert payload.node("https://a.com/").size == pytest.approx(2 + math.log(3) * 2)


class TestNodeHelpers:
    def test_node_color_priority(self) -> None:
        assert node_color([]) == HEALTHY_COLOR
        assert node_color([IssueRecord("u", Severity.INFO)]) == HEALTHY_COLOR
        assert node_color([IssueRecord("u", Severity.WARNING)]) == WARNING_COLOR
        assert node_color(
            [IssueRecord("u", Severity.WARNING), IssueRecord("u", Severity.CRITICAL)]
        ) == CRITICAL_COLOR

    def test_node_size(self) -> None:
        assert node_size(0) == 2.0
        assert node_size(9, base=1.0, scale=3.0) == pytest.approx(1 + math.log(10) * 3)


# ---------------------------------------------------------------------------
# focus_graph
# ---------------------------------------------------------------------------

class TestFocusGraph:
    def test_no_selection_returns_input(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        assert focus_graph(payload, None) is payload

    def test_keeps_only_touching_edges(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        focused = focus_graph(payload, "https://a.com/about")
        assert [(e.source, e.target) for e in focused.edges] == [
            ("https://a.com/", "https://a.com/about"),
            ("https://a.com/about", "https://a.com/"),
        ]

    def test_dims_only_untouched_nodes(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        focused = focus_graph(payload, "https://a.com/about")
        dimmed = {n.id for n in focused.nodes if n.dimmed}
        assert dimmed == {
            "https://a.com/blog/",
            "https://a.com/blog/post-1",
            "https://a.com/gone",
            "https://a.com/orphan",
        }
        assert all(n.color == DIMMED_COLOR for n in focused.nodes if n.dimmed)
        assert focused.node("https://a.com/").color == HEALTHY_COLOR

    def test_never_removes_nodes(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        for node in payload.nodes:
            assert len(focus_graph(payload, node.id).nodes) == len(payload.nodes)

    def test_isolated_selection(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        focused = focus_graph(payload, "https://a.com/orphan")
        assert focused.edges == []
        assert not focused.node("https://a.com/orphan").dimmed
        assert all(n.dimmed for n in focused.nodes if n.id != "https://a.com/orphan")

    def test_does_not_mutate_input(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        snapshot = replace(payload, nodes=list(payload.nodes), edges=list(payload.edges))
        focus_graph(payload, "https://a.com/orphan")
        assert payload == snapshot
        assert not any(n.dimmed for n in payload.nodes)

    def test_neighbours(self, site: list[CrawledPage]) -> None:
        payload = build_graph(site, [])
        incoming, outgoing = neighbours(payload, "https://a.com/blog/post-1")
        assert incoming == ["https://a.com/blog/"]
        assert outgoing == ["https://a.com/gone"]
