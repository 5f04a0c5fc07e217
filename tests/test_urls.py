"""Tests for URL normalisation and internal-link resolution."""

from __future__ import annotations

import pytest

from sitegraph.graph.models import CrawledPage
from sitegraph.graph.urls import build_url_index, normalize_url, resolve_internal_url


# ---------------------------------------------------------------------------
# normalize_url
# ---------------------------------------------------------------------------

class TestNormalizeUrl:
    def test_trailing_slash_is_ignored(self) -> None:
        assert normalize_url("https://a.com/x/") == normalize_url("https://a.com/x")
        assert normalize_url("https://a.com/x") == "https://a.com/x"

    def test_root_collapses_to_origin(self) -> None:
        assert normalize_url("https://a.com/") == "https://a.com"
        assert normalize_url("https://a.com") == "https://a.com"

    def test_query_and_fragment_dropped(self) -> None:
        assert normalize_url("https://a.com/x?page=2#top") == "https://a.com/x"

    def test_scheme_and_host_lowercased(self) -> None:
        assert normalize_url("HTTPS://A.COM/Path") == "https://a.com/Path"

    def test_default_port_dropped_other_port_kept(self) -> None:
        assert normalize_url("https://a.com:443/x") == "https://a.com/x"
        assert normalize_url("http://a.com:80/x") == "http://a.com/x"
        assert normalize_url("http://a.com:8080/x/") == "http://a.com:8080/x"

    def test_credentials_dropped(self) -> None:
        assert normalize_url("https://user:pw@a.com/x") == "https://a.com/x"

    def test_relative_falls_back_to_raw(self) -> None:
        assert normalize_url("/about/") == "/about"
        assert normalize_url("about") == "about"

    @pytest.mark.parametrize(
        "url",
        ["http://[::1", "https://a.com:99999/x", "not a url/", "", "mailto:me@a.com"],
    )
    def test_malformed_never_raises(self, url: str) -> None:
        assert normalize_url(url) == url.rstrip("/")

    @pytest.mark.parametrize(
        "url",
        [
            "https://a.com/x/",
            "https://a.com/",
            "HTTPS://A.com:443/x?q=1",
            "/about/",
            "relative/path/",
            "http://[::1",
            "https://a.com/x//",
        ],
    )
    def test_idempotent(self, url: str) -> None:
        once = normalize_url(url)
        assert normalize_url(once) == once


# ---------------------------------------------------------------------------
# build_url_index
# ---------------------------------------------------------------------------

class TestBuildUrlIndex:
    def test_maps_normalised_to_canonical(self) -> None:
        index = build_url_index([CrawledPage(url="https://a.com/about/")])
        assert index == {"https://a.com/about": "https://a.com/about/"}

    def test_first_page_wins_on_collision(self) -> None:
        index = build_url_index(
            [CrawledPage(url="https://a.com/x"), CrawledPage(url="https://a.com/x/")]
        )
        assert index == {"https://a.com/x": "https://a.com/x"}


# ---------------------------------------------------------------------------
# resolve_internal_url
# ---------------------------------------------------------------------------

@pytest.fixture()
def index() -> dict[str, str]:
    return build_url_index(
        [
            CrawledPage(url="https://a.com/"),
            CrawledPage(url="https://a.com/about"),
            CrawledPage(url="https://a.com/blog/"),
        ]
    )


class TestResolveInternalUrl:
    def test_absolute_direct_hit(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("https://a.com/about", "https://a.com/", index) == "https://a.com/about"

    def test_returns_canonical_url_not_normalised(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("https://a.com/blog", "https://a.com/", index) == "https://a.com/blog/"

    def test_relative_resolved_against_origin(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("/about", "https://a.com/x", index) == "https://a.com/about"

    def test_relative_without_leading_slash_uses_origin(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("about", "https://a.com/deep/page", index) == "https://a.com/about"

    def test_relative_with_query(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("/blog/?page=2", "https://a.com/", index) == "https://a.com/blog/"

    def test_external_is_none(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("https://other.com/about", "https://a.com/", index) is None

    def test_uncrawled_relative_is_none(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("/missing", "https://a.com/", index) is None

    def test_non_http_scheme_is_none(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("mailto:hi@a.com", "https://a.com/", index) is None

    def test_relative_on_unparseable_origin_is_none(self, index: dict[str, str]) -> None:
        assert resolve_internal_url("/about", "not a url", index) is None

    def test_empty_index(self) -> None:
        assert resolve_internal_url("/about", "https://a.com/", {}) is None

    @pytest.mark.parametrize("href", ["http://[::1", "//[bad/x", "https://a.com:99999/x"])
    def test_unparseable_href_is_none(self, index: dict[str, str], href: str) -> None:
        assert resolve_internal_url(href, "https://a.com/", index) is None
