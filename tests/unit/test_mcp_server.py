"""Unit tests for MCP server implementation."""

import json

import httpx
import pytest
from fastmcp import FastMCP

from jdss_doc_mcp.mcp_server import SERVER_NAME, create_mcp_server, register_documentation_tools

from conftest import BASE_URL, LATEST_PAGE, RecordingRevealer, make_zip


TOOL_NAMES = {
    "get_edss_documentation",
    "download_edss_documentation",
    "search_edss_documentation",
    "analyze_edss_api_endpoints",
    "compare_documentation_versions",
    "discover_documentation_links",
    "get_edss_documentation_enhanced",
}


@pytest.fixture
def tools(service_factory, doc_routes):
    """Register tools against a mocked documentation host."""
    def factory(routes=None, revealer=None):
        service, client = service_factory(routes or doc_routes, revealer)
        return register_documentation_tools(FastMCP("test"), service), client
    return factory


class TestServerCreation:
    """Tests for server creation and tool registration."""

    def test_server_name(self, service_factory, doc_routes):
        service, _ = service_factory(doc_routes)
        mcp = create_mcp_server(service=service)

        assert mcp.name == SERVER_NAME

    def test_all_tools_registered(self, service_factory, doc_routes):
        """Test that all seven documentation tools are registered."""
        service, _ = service_factory(doc_routes)
        mcp = create_mcp_server(service=service)

        tools_dict = mcp._tool_manager._tools
        assert set(tools_dict.keys()) == TOOL_NAMES

    def test_tool_descriptions(self, service_factory, doc_routes):
        service, _ = service_factory(doc_routes)
        mcp = create_mcp_server(service=service)

        tools_dict = mcp._tool_manager._tools
        assert tools_dict["search_edss_documentation"].description == (
            "Search for specific terms or endpoints in EDSS documentation"
        )

    def test_handlers_returned_by_name(self, tools):
        handlers, _ = tools()
        assert set(handlers.keys()) == TOOL_NAMES


class TestToolHandlers:
    """Tests for tool responses."""

    @pytest.mark.asyncio
    async def test_get_documentation(self, tools):
        handlers, _ = tools()
        assert await handlers["get_edss_documentation"]() == LATEST_PAGE

    @pytest.mark.asyncio
    async def test_get_documentation_error_is_text(self, tools):
        """Test that a failure becomes an error message, not an exception."""
        handlers, _ = tools()

        result = await handlers["get_edss_documentation"](version="nonexistent")

        assert result.startswith("Error: Documentation retrieval failed:")
        assert "nonexistent" in result

    @pytest.mark.asyncio
    async def test_search_returns_json(self, tools):
        handlers, _ = tools()

        response = json.loads(await handlers["search_edss_documentation"](query="pools"))

        assert response["total"] > 0
        assert response["results"][0]["version"] == "latest"

    @pytest.mark.asyncio
    async def test_search_empty_query_error(self, tools):
        handlers, _ = tools()

        response = json.loads(await handlers["search_edss_documentation"](query=""))

        assert response["error"].startswith("Search failed:")

    @pytest.mark.asyncio
    async def test_analyze_endpoints(self, tools):
        handlers, _ = tools()

        response = json.loads(await handlers["analyze_edss_api_endpoints"](detailed=True))

        assert response["total"] == 2
        assert response["detailed"] is True

    @pytest.mark.asyncio
    async def test_compare_invalid_focus(self, tools):
        handlers, _ = tools()

        response = json.loads(await handlers["compare_documentation_versions"](focus="everything"))

        assert "Invalid focus" in response["error"]

    @pytest.mark.asyncio
    async def test_compare_summary(self, tools):
        handlers, _ = tools()

        response = json.loads(await handlers["compare_documentation_versions"]())

        assert response["focus"] == "summary"
        assert response["summary"]["latest_size"] == len(LATEST_PAGE)
        assert "endpoints" not in response

    @pytest.mark.asyncio
    async def test_discover_links(self, tools):
        handlers, _ = tools()

        response = json.loads(await handlers["discover_documentation_links"](refresh=True))

        assert response["totalFound"] == 3

    @pytest.mark.asyncio
    async def test_download_not_accessible(self, tools):
        handlers, _ = tools()

        response = json.loads(await handlers["download_edss_documentation"]())

        assert response["accessible"] is False
        assert response["zip_url"].endswith("get_doc.php?t=zip")
        assert response["description"] == "Download complete EDSS documentation as ZIP"

    @pytest.mark.asyncio
    async def test_enhanced(self, tools, doc_routes):
        zip_url = BASE_URL + "docs/EDSS/trunk/documentation/v4/get_doc.php?t=zip"
        archive = make_zip([("index.html", "<p>x</p>"), ("jquery.js", "jq")])
        routes = {**doc_routes, zip_url: httpx.Response(200, content=archive)}
        handlers, _ = tools(routes, RecordingRevealer())

        result = await handlers["get_edss_documentation_enhanced"](version="trunk", apiVersion="v4")

        assert result.startswith("Enhanced EDSS Documentation (trunk v4)")
        assert result.endswith("<html>revealed</html>")

    @pytest.mark.asyncio
    async def test_enhanced_error_is_text(self, tools):
        handlers, _ = tools()

        result = await handlers["get_edss_documentation_enhanced"]()

        assert result.startswith("Error: Error retrieving enhanced documentation:")
