"""
Unit tests for request canonicalization.
"""

import pytest

from usabilla.canonical import (
    EMPTY_BODY_HASH,
    build_query_string,
    canonical_headers,
    canonical_string,
    resolve_path,
    sha256_hex,
)


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_substitutes_id(self):
        """The id replaces the :id placeholder."""
        assert resolve_path("/live/websites/button/:id/feedback", "42") == (
            "/live/websites/button/42/feedback"
        )

    def test_wildcard_is_percent_encoded(self):
        """A literal * is sent as %2A."""
        assert resolve_path("/x/:id/y", "*") == "/x/%2A/y"

    def test_absent_id_is_noop(self):
        """No id leaves the placeholder in place."""
        assert resolve_path("/x/:id/y") == "/x/:id/y"

    def test_empty_id_is_noop(self):
        """An empty id leaves the placeholder in place."""
        assert resolve_path("/x/:id/y", "") == "/x/:id/y"

    def test_numeric_id(self):
        """Non-string ids are rendered with str()."""
        assert resolve_path("/x/:id/y", 7) == "/x/7/y"

    def test_template_without_placeholder(self):
        """A template without :id comes back unchanged."""
        assert resolve_path("/live/websites/button", "42") == "/live/websites/button"

    def test_only_first_placeholder_replaced(self):
        """Only the first :id is substituted."""
        assert resolve_path("/a/:id/b/:id", "1") == "/a/1/b/:id"


class TestBuildQueryString:
    """Tests for build_query_string()."""

    def test_keys_sorted(self):
        """Keys are sorted regardless of insertion order."""
        assert build_query_string({"b": 2, "a": 1}) == "a=1&b=2"
        assert build_query_string({"a": 1, "b": 2}) == "a=1&b=2"

    def test_single_param(self):
        """No separator around a single pair."""
        assert build_query_string({"limit": "5"}) == "limit=5"

    @pytest.mark.parametrize("params", [None, {}])
    def test_empty(self, params):
        """Empty or absent params give an empty string."""
        assert build_query_string(params) == ""

    def test_values_not_encoded(self):
        """Values are passed through verbatim."""
        assert build_query_string({"q": "a b&c"}) == "q=a b&c"

    def test_uppercase_sorts_first(self):
        """Sorting is by code point, so uppercase keys come first."""
        assert build_query_string({"b": 1, "B": 2, "a": 3}) == "B=2&a=3&b=1"

    def test_scalar_rendering(self):
        """Booleans and None render the way the API expects."""
        assert build_query_string({"x": True, "y": False, "z": None}) == "x=true&y=false&z=null"

    def test_no_state_between_calls(self):
        """A second call never carries over pairs from the first."""
        build_query_string({"limit": 5})
        assert build_query_string({"since": 1}) == "since=1"
        assert build_query_string({}) == ""


class TestCanonicalString:
    """Tests for canonical_string()."""

    def test_exact_layout(self):
        """Canonical request matches the byte layout the server computes."""
        result = canonical_string(
            "GET",
            "/live/websites/button/42/feedback",
            "limit=5",
            "Mon, 02 Jan 2017 15:04:05 GMT",
            "data.usabilla.com",
        )

        assert result == (
            "GET\n"
            "/live/websites/button/42/feedback\n"
            "limit=5\n"
            "date:Mon, 02 Jan 2017 15:04:05 GMT\n"
            "host:data.usabilla.com\n"
            "\n"
            "date;host\n"
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_blank_line_after_host(self):
        """The host segment always ends with a blank line."""
        result = canonical_string("GET", "/p", "", "d", "h")
        assert "host:h\n\ndate;host\n" in result

    def test_default_method(self):
        """An empty method falls back to GET."""
        assert canonical_string(None, "/p", "", "d", "h").startswith("GET\n/p\n")

    def test_empty_query_keeps_its_line(self):
        """An empty query string still occupies a line."""
        lines = canonical_string("GET", "/p", "", "d", "h").split("\n")
        assert lines[2] == ""
        assert len(lines) == 8

    def test_deterministic(self):
        """Same inputs give the same string."""
        args = ("GET", "/p", "a=1", "d", "h")
        assert canonical_string(*args) == canonical_string(*args)


class TestSha256Hex:
    """Tests for sha256_hex()."""

    def test_empty_body_hash(self):
        """Empty body hash is the well-known SHA-256 of ''."""
        assert EMPTY_BODY_HASH == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_str_and_bytes_agree(self):
        """str input is hashed as UTF-8."""
        assert sha256_hex("abc") == sha256_hex(b"abc")


class TestCanonicalHeaders:
    """Tests for canonical_headers()."""

    def test_lines(self):
        """Returns the date line and the host line with its own newline."""
        assert canonical_headers("d", "h") == ["date:d", "host:h\n"]
