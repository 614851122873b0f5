"""Tests for query encoding and URL construction."""

from avva_net._internal.query import append_query, build_url, encode_query, is_absolute_url


class TestEncodeQuery:
    """Tests for encode_query()."""

    def test_single_pair_has_trailing_separator(self):
        """Every pair should be followed by &."""
        assert encode_query({"page": "1"}) == "page=1&"

    def test_preserves_insertion_order(self):
        """Should encode pairs in mapping order."""
        params = {"z": "26", "a": "1", "m": "13"}
        assert encode_query(params) == "z=26&a=1&m=13&"

    def test_does_not_percent_encode(self):
        """Values are passed through; callers pre-encode."""
        assert encode_query({"q": "a b/c"}) == "q=a b/c&"

    def test_empty_and_none(self):
        """Empty or missing params should encode as an empty string."""
        assert encode_query({}) == ""
        assert encode_query(None) == ""


class TestAppendQuery:
    """Tests for append_query()."""

    def test_uses_question_mark_without_existing_query(self):
        """Should start the query with ? when none exists."""
        assert append_query("https://api.test/items", {"page": "1"}) == (
            "https://api.test/items?page=1&"
        )

    def test_uses_ampersand_with_existing_query(self):
        """Should continue an existing query with &."""
        assert append_query("https://api.test/items?sort=asc", {"page": "1"}) == (
            "https://api.test/items?sort=asc&page=1&"
        )

    def test_empty_params_leave_separator(self):
        """The separator should be written even without params."""
        assert append_query("https://api.test/items", None) == "https://api.test/items?"
        assert append_query("https://api.test/items?x=1", {}) == "https://api.test/items?x=1&"


class TestBuildUrl:
    """Tests for build_url()."""

    def test_joins_with_single_slash(self):
        """Should join base and path with exactly one slash."""
        assert build_url("https://api.test", "/items") == "https://api.test/items"
        assert build_url("https://api.test/", "/items") == "https://api.test/items"
        assert build_url("https://api.test/v1/", "items") == "https://api.test/v1/items"
        assert build_url("https://api.test/v1", "items") == "https://api.test/v1/items"

    def test_absolute_url_passes_through(self):
        """Absolute URLs should ignore the base address."""
        assert build_url("https://api.test", "https://cdn.test/f.bin") == "https://cdn.test/f.bin"

    def test_no_base_address(self):
        """Without a base address the path should be returned unchanged."""
        assert build_url(None, "/items") == "/items"

    def test_empty_path(self):
        """An empty path should resolve to the base address."""
        assert build_url("https://api.test/v1", "") == "https://api.test/v1"


class TestIsAbsoluteUrl:
    """Tests for is_absolute_url()."""

    def test_absolute(self):
        """URLs with scheme and host should be absolute."""
        assert is_absolute_url("https://api.test") is True
        assert is_absolute_url("http://localhost:8080/x") is True

    def test_relative(self):
        """Paths without a scheme should be relative."""
        assert is_absolute_url("/items") is False
        assert is_absolute_url("items?x=1") is False
