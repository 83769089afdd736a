"""Unit tests for endpoint, method and auth extraction."""

from hypothesis import given, strategies as st

from jdss_doc_mcp.comparator import endpoint_diff
from jdss_doc_mcp.extractor import (
    extract_auth_info,
    extract_endpoint_candidates,
    extract_endpoints,
    extract_http_methods,
    extract_section,
)
from jdss_doc_mcp.models import Parameter

from conftest import LATEST_PAGE


class TestExtractEndpoints:
    """Tests for METHOD /path extraction."""

    def test_one_record_per_method_path_pair(self):
        """Test that each occurrence yields exactly one record."""
        endpoints = extract_endpoints("GET /api/v4/volumes and POST /api/v4/pools")

        assert [e.signature for e in endpoints] == [
            ("GET", "/api/v4/volumes"),
            ("POST", "/api/v4/pools"),
        ]

    def test_methods_are_case_sensitive(self):
        assert extract_endpoints("get /api/v4/volumes") == []

    def test_matches_inside_words_and_without_slash(self):
        """Test that the heuristic fires on prose and on method tokens inside words."""
        endpoints = extract_endpoints("Use GET requests. TARGET /x")

        assert [e.signature for e in endpoints] == [
            ("GET", "requests."),
            ("GET", "/x"),
        ]

    def test_endpoint_diff_sees_unanchored_matches(self):
        """Test that prose matches take part in the version diff."""
        diff = endpoint_diff("TARGET /x", "")

        assert [e.signature for e in diff.latest_only] == [("GET", "/x")]

    def test_repeated_occurrences_are_kept(self):
        endpoints = extract_endpoints("GET /a then GET /a")
        assert len(endpoints) == 2

    def test_summary_mode_has_no_details(self):
        endpoint = extract_endpoints(LATEST_PAGE)[0]

        assert endpoint.description is None
        assert endpoint.parameters is None
        assert endpoint.to_dict() == {"method": "GET", "path": "/api/v4/pools"}

    def test_detailed_mode_adds_description_and_parameters(self):
        """Test description from the preceding paragraph and parameters after the match."""
        endpoints = extract_endpoints(LATEST_PAGE, detailed=True)
        post = endpoints[1]

        assert post.signature == ("POST", "/api/v4/pools/{pool}/volumes")
        assert post.description == "Create a volume."
        assert post.parameters == [
            Parameter(name="name", type="string"),
            Parameter(name="size", type="integer"),
        ]

    def test_description_strips_tags(self):
        endpoints = extract_endpoints("<p><b>Bold</b> text</p>\nGET /x", detailed=True)
        assert endpoints[0].description == "Bold text"

    def test_description_outside_window_is_empty(self):
        """Test that a paragraph more than 200 characters away is ignored."""
        html = "<p>far away</p>" + " " * 300 + "GET /x"
        endpoints = extract_endpoints(html, detailed=True)

        assert endpoints[0].description == ""
        assert endpoints[0].parameters == []

    @given(st.text(alphabet="GETPOSTDL /{}api4v<>p\n", max_size=200))
    def test_extraction_is_deterministic(self, text):
        """Test that running extraction twice gives the same result."""
        assert extract_endpoints(text, detailed=True) == extract_endpoints(text, detailed=True)


class TestExtractEndpointCandidates:
    """Tests for the pooled pattern battery."""

    def test_same_endpoint_appears_in_both_forms(self):
        """Test that bare-path and method-prefixed matches are both kept."""
        candidates = extract_endpoint_candidates("GET /api/v4/pools")

        assert candidates == ["/api/v4/pools", "GET /api/v4/pools"]

    def test_exact_duplicates_are_removed(self):
        candidates = extract_endpoint_candidates("GET /api/v4/pools GET /api/v4/pools")

        assert candidates == ["/api/v4/pools", "GET /api/v4/pools"]

    def test_endpoint_and_url_prefixes(self):
        candidates = extract_endpoint_candidates("Endpoint: /pools\nURL: /api/pools")

        assert "Endpoint: /pools" in candidates
        assert "URL: /api/pools" in candidates


class TestExtractHttpMethods:
    def test_finds_whole_word_methods(self):
        assert extract_http_methods("GET x POST y GETTER OPTIONS") == {"GET", "POST", "OPTIONS"}

    def test_no_methods(self):
        assert extract_http_methods("nothing here") == set()


class TestExtractAuthInfo:
    """Tests for authentication keyword detection."""

    def test_keywords_are_case_insensitive(self):
        auth = extract_auth_info("Use a Bearer TOKEN")

        assert auth.found is True
        assert auth.keywords == ["token", "bearer"]

    def test_no_keywords(self):
        auth = extract_auth_info("<p>List all pools.</p>")

        assert auth.found is False
        assert auth.keywords == []


class TestExtractSection:
    """Tests for heading-bounded section extraction."""

    def test_returns_heading_through_next_heading(self):
        section = extract_section(LATEST_PAGE, "pools")

        assert section.startswith("<h2>Pools</h2>")
        assert "GET /api/v4/pools" in section
        assert "Volumes" not in section

    def test_last_section_runs_to_end(self):
        section = extract_section(LATEST_PAGE, "Volumes")

        assert "POST /api/v4/pools/{pool}/volumes" in section
        assert section.rstrip().endswith("</html>")

    def test_missing_section_returns_none(self):
        assert extract_section(LATEST_PAGE, "Snapshots") is None

    def test_section_name_is_literal(self):
        assert extract_section("<h2>axb</h2><p>text</p>", "a.b") is None
