"""Tests for URL canonicalization and fingerprinting."""

from __future__ import annotations

from evidence_ledger.url import (
    canonicalize,
    extract_domain,
    registrable_domain,
    title_fingerprint,
)


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_lowercases_scheme_and_host(self):
        assert canonicalize("HTTPS://News.Example.COM/Story") == "https://news.example.com/Story"

    def test_strips_default_port_and_fragment(self):
        assert canonicalize("https://example.com:443/a#section") == "https://example.com/a"
        assert canonicalize("http://example.com:80/a") == "http://example.com/a"

    def test_keeps_non_default_port(self):
        assert canonicalize("https://example.com:8443/a") == "https://example.com:8443/a"

    def test_strips_tracking_params_and_sorts_query(self):
        url = "https://example.com/news?utm_source=x&b=2&fbclid=abc&a=1&UTM_Medium=y"
        assert canonicalize(url) == "https://example.com/news?a=1&b=2"

    def test_strips_trailing_slashes_but_keeps_root(self):
        assert canonicalize("https://example.com/news/story//") == "https://example.com/news/story"
        assert canonicalize("https://example.com/") == "https://example.com/"
        assert canonicalize("https://example.com") == "https://example.com/"

    def test_strips_amp_segments(self):
        expected = "https://example.com/news/story"
        assert canonicalize("https://example.com/amp/news/story") == expected
        assert canonicalize("https://example.com/news/story/amp") == expected

    def test_tracking_variants_share_a_key(self):
        a = canonicalize("https://Example.com/story?utm_campaign=spring&id=7")
        b = canonicalize("https://example.com/story/?id=7&gclid=123#comments")
        assert a == b

    def test_unparseable_url_returned_unchanged(self):
        assert canonicalize("not a url") == "not a url"
        assert canonicalize("") == ""

    def test_idempotent(self):
        url = "https://www.example.com/amp/a/b/?z=1&utm_term=q&a=2"
        once = canonicalize(url)
        assert canonicalize(once) == once


class TestRegistrableDomain:
    """Tests for registrable_domain."""

    def test_multi_part_suffix(self):
        assert registrable_domain("https://news.bbc.co.uk/x") == "bbc.co.uk"

    def test_simple_domain(self):
        assert registrable_domain("https://www.reuters.com/world") == "reuters.com"

    def test_ip_and_localhost_have_no_domain(self):
        assert registrable_domain("http://127.0.0.1/page") is None
        assert registrable_domain("http://localhost:8000/") is None

    def test_garbage_has_no_domain(self):
        assert registrable_domain("") is None


def test_extract_domain_drops_www():
    assert extract_domain("https://www.osha.gov/news/release") == "osha.gov"
    assert extract_domain("https://sub.example.org/") == "sub.example.org"
    assert extract_domain("no host here") == ""


class TestTitleFingerprint:
    """Tests for title_fingerprint."""

    def test_format(self):
        value = title_fingerprint("Acme fined for safety violations")
        assert len(value) == 16
        assert all(c in "0123456789abcdef" for c in value)

    def test_empty_input_is_offset_basis(self):
        assert title_fingerprint("") == "cbf29ce484222325"

    def test_ignores_case_and_punctuation(self):
        assert title_fingerprint("Acme Fined!", "Details...") == title_fingerprint(
            "acme fined", "details"
        )

    def test_only_first_thirty_tokens_count(self):
        words = " ".join(f"w{i}" for i in range(30))
        assert title_fingerprint(words) == title_fingerprint(words, "extra tail words")

    def test_different_titles_differ(self):
        assert title_fingerprint("Acme recalls toys") != title_fingerprint("Acme opens plant")
