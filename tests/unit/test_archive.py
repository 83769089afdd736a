"""Unit tests for ZIP archive extraction."""

import pytest

from jdss_doc_mcp.archive import extract_primary
from jdss_doc_mcp.exceptions import ExtractionError

from conftest import make_zip


HTML = "<html><body><h1>JovianDSS REST API</h1><p>Zażółć</p></body></html>"
SCRIPT = "window.jQuery = window.$ = function () {};"


class TestExtractPrimary:
    """Tests for locating the primary document and script library."""

    def test_returns_html_and_script_unmodified(self):
        """Test that entry content round-trips exactly."""
        archive = make_zip([
            ("doc/index.html", HTML),
            ("doc/js/jquery-3.7.1.min.js", SCRIPT),
        ])

        contents = extract_primary(archive)

        assert contents.html == HTML
        assert contents.html.encode("utf-8") == HTML.encode("utf-8")
        assert contents.script_library == SCRIPT
        assert contents.html_name == "doc/index.html"
        assert contents.script_name == "doc/js/jquery-3.7.1.min.js"

    def test_first_html_entry_wins(self):
        """Test archive order decides the primary document."""
        archive = make_zip([
            ("b/second.html", "<p>first in archive</p>"),
            ("a/index.html", "<p>second in archive</p>"),
        ])

        contents = extract_primary(archive)

        assert contents.html == "<p>first in archive</p>"

    def test_first_matching_script_wins(self):
        archive = make_zip([
            ("index.html", HTML),
            ("js/jquery.js", "first"),
            ("js/jquery.ui.js", "second"),
        ])

        assert extract_primary(archive).script_library == "first"

    def test_ignores_directories_and_other_scripts(self):
        """Test that directory entries and unrelated scripts are skipped."""
        archive = make_zip([
            ("docs.html/", ""),
            ("js/app.js", "app()"),
            ("jquery.css", "body {}"),
            ("index.html", HTML),
        ])

        contents = extract_primary(archive)

        assert contents.html_name == "index.html"
        assert contents.script_library is None

    def test_missing_script_is_not_an_error(self):
        archive = make_zip([("index.html", HTML)])

        contents = extract_primary(archive)

        assert contents.html == HTML
        assert contents.script_library is None
        assert contents.script_name is None

    def test_no_html_raises_extraction_error(self):
        archive = make_zip([("readme.txt", "nothing here"), ("jquery.js", SCRIPT)])

        with pytest.raises(ExtractionError, match="No HTML file found"):
            extract_primary(archive)

    def test_invalid_zip_raises_extraction_error(self):
        with pytest.raises(ExtractionError, match="Invalid ZIP"):
            extract_primary(b"<html>not a zip</html>")

    def test_custom_script_marker(self):
        archive = make_zip([("index.html", HTML), ("vendor/zepto.js", "zepto")])

        assert extract_primary(archive, script_marker="zepto").script_library == "zepto"
