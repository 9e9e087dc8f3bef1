"""Tests for warm target URL rewriting."""

import pytest

from warmer.core.url_utils import resolve_warm_url, rewrite_host


class TestRewriteHost:
    def test_replaces_ip_host_and_keeps_query(self):
        assert (
            rewrite_host("http://10.0.0.5/wiki/foo?x=1", "example.org")
            == "http://example.org/wiki/foo?x=1"
        )

    def test_keeps_scheme_and_fragment(self):
        assert (
            rewrite_host("https://cdn.internal/a#frag", "example.org")
            == "https://example.org/a#frag"
        )

    def test_keeps_query_and_fragment_together(self):
        assert (
            rewrite_host("https://lb-3.internal:8080/wiki/x?rev=2&lang=en#top", "example.org")
            == "https://example.org/wiki/x?rev=2&lang=en#top"
        )

    def test_drops_original_port_and_userinfo(self):
        assert (
            rewrite_host("http://user:pw@internal:8080/p", "example.org")
            == "http://example.org/p"
        )

    def test_host_with_port(self):
        assert rewrite_host("http://internal/p", "example.org:8443") == "http://example.org:8443/p"

    def test_url_without_path(self):
        assert rewrite_host("https://internal", "example.org") == "https://example.org"

    def test_empty_query_marker_is_not_kept(self):
        assert rewrite_host("http://internal/p?", "example.org") == "http://example.org/p"

    @pytest.mark.parametrize(
        "url",
        ["", "ftp://internal/file", "/relative/path", "http:///no-host", "http://a/\x00"],
    )
    def test_rejects_invalid_urls(self, url):
        with pytest.raises(ValueError):
            rewrite_host(url, "example.org")

    def test_rejects_empty_host(self):
        with pytest.raises(ValueError):
            rewrite_host("http://internal/p", "")


class TestResolveWarmUrl:
    def test_without_canonical_host_uses_url_verbatim(self):
        url = "http://10.0.0.5/wiki/foo?x=1"
        assert resolve_warm_url(url, None) == url

    def test_with_canonical_host_rewrites(self):
        assert resolve_warm_url("http://10.0.0.5/wiki/foo", "example.org") == (
            "http://example.org/wiki/foo"
        )

    @pytest.mark.parametrize("url", ["ftp://files/x", "/relative/path", "http:///no-host"])
    @pytest.mark.parametrize("canonical_host", [None, "example.org"])
    def test_rejects_non_web_urls_with_or_without_host(self, url, canonical_host):
        with pytest.raises(ValueError):
            resolve_warm_url(url, canonical_host)
