"""MCP server implementation exposing the JDSS REST documentation as tools."""

import json
import logging
from dataclasses import asdict
from typing import Awaitable, Callable, Dict, Optional

from fastmcp import FastMCP

from .models import DocsConfig
from .service import DocumentationService


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SERVER_NAME = "jdss-rest-documentation"

ToolHandler = Callable[..., Awaitable[str]]

TOOL_DESCRIPTIONS = {
    "get_edss_documentation": "Get EDSS REST API documentation (latest or trunk version)",
    "download_edss_documentation": "Get download link for EDSS documentation as ZIP file",
    "search_edss_documentation": "Search for specific terms or endpoints in EDSS documentation",
    "analyze_edss_api_endpoints": "Extract and analyze API endpoints from EDSS documentation",
    "compare_documentation_versions": "Compare latest and trunk versions of EDSS documentation",
    "discover_documentation_links": (
        "Discover all available EDSS documentation by parsing the documentation homepage"
    ),
    "get_edss_documentation_enhanced": (
        "Get EDSS documentation with automatic version discovery and jQuery processing"
    ),
}


def _error_json(prefix: str, error: Exception) -> str:
    error_msg = f"{prefix}: {str(error)}"
    logger.error(error_msg, exc_info=True)
    return json.dumps({"error": error_msg})


def _error_text(prefix: str, error: Exception) -> str:
    error_msg = f"{prefix}: {str(error)}"
    logger.error(error_msg, exc_info=True)
    return f"Error: {error_msg}"


def register_documentation_tools(mcp: FastMCP, service: DocumentationService) -> Dict[str, ToolHandler]:
    """
    Register the documentation tools with the MCP server.

    Every handler converts failures into an error payload; no exception
    leaves a tool call.

    Args:
        mcp: FastMCP server instance
        service: Documentation service backing the tools

    Returns:
        Mapping of tool name to its handler
    """

    async def get_edss_documentation(version: str = "latest", section: Optional[str] = None) -> str:
        """
        Get the documentation page of a version.

        Args:
            version: Documentation version to retrieve (latest or trunk)
            section: Optional heading of a specific section to retrieve
        """
        try:
            logger.info(f"get_edss_documentation invoked with version: {version}, section: {section}")
            return await service.get_documentation(version, section)
        except Exception as e:
            return _error_text("Documentation retrieval failed", e)

    async def download_edss_documentation(version: str = "latest") -> str:
        """
        Get download information for the documentation ZIP archive.

        Args:
            version: Documentation version (latest or trunk)
        """
        try:
            logger.info(f"download_edss_documentation invoked with version: {version}")
            info = await service.download_info(version)
            response = asdict(info)
            response["description"] = "Download complete EDSS documentation as ZIP"
            return json.dumps(response, indent=2)
        except Exception as e:
            return _error_json("Download lookup failed", e)

    async def search_edss_documentation(query: str, version: str = "latest") -> str:
        """
        Search for a literal term in the documentation.

        Args:
            query: Search term (e.g. 'pool', 'POST', '/api/v4/pools')
            version: Which version to search: latest, trunk or both
        """
        try:
            logger.info(f"search_edss_documentation invoked with query: '{query}', version: {version}")
            response = await service.search_documentation(query, version)
            logger.info(f"Found {response['total']} matches")
            return json.dumps(response, indent=2)
        except Exception as e:
            return _error_json("Search failed", e)

    async def analyze_edss_api_endpoints(version: str = "latest", detailed: bool = False) -> str:
        """
        Extract API endpoints from the documentation.

        Args:
            version: Documentation version to analyze (latest or trunk)
            detailed: Include descriptions and parameters of each endpoint
        """
        try:
            logger.info(f"analyze_edss_api_endpoints invoked with version: {version}, detailed: {detailed}")
            response = await service.analyze_endpoints(version, detailed)
            return json.dumps(response, indent=2)
        except Exception as e:
            return _error_json("Analysis failed", e)

    async def compare_documentation_versions(focus: str = "summary") -> str:
        """
        Compare the latest and trunk documentation.

        Args:
            focus: What to compare: endpoints, changes, summary or all
        """
        try:
            logger.info(f"compare_documentation_versions invoked with focus: {focus}")
            result = await service.compare_versions(focus)
            return json.dumps(result.to_dict(), indent=2)
        except Exception as e:
            return _error_json("Comparison failed", e)

    async def discover_documentation_links(refresh: bool = False) -> str:
        """
        Discover all documentation versions listed on the documentation host.

        Args:
            refresh: Force refresh of the discovery cache
        """
        try:
            logger.info(f"discover_documentation_links invoked with refresh: {refresh}")
            response = await service.discover_links(refresh)
            return json.dumps(response, indent=2)
        except Exception as e:
            return _error_json("Discovery failed", e)

    async def get_edss_documentation_enhanced(
        version: str = "latest",
        apiVersion: str = "v4",
        useJavaScript: bool = True
    ) -> str:
        """
        Get documentation from the ZIP download with hidden content revealed.

        Args:
            version: 'latest', 'trunk' or a specific release name
            apiVersion: API version, v3 or v4
            useJavaScript: Process the page with jQuery to reveal hidden content
        """
        try:
            logger.info(
                f"get_edss_documentation_enhanced invoked with version: {version}, "
                f"apiVersion: {apiVersion}, useJavaScript: {useJavaScript}"
            )
            return await service.get_documentation_enhanced(version, apiVersion, useJavaScript)
        except Exception as e:
            return _error_text("Error retrieving enhanced documentation", e)

    handlers = {
        "get_edss_documentation": get_edss_documentation,
        "download_edss_documentation": download_edss_documentation,
        "search_edss_documentation": search_edss_documentation,
        "analyze_edss_api_endpoints": analyze_edss_api_endpoints,
        "compare_documentation_versions": compare_documentation_versions,
        "discover_documentation_links": discover_documentation_links,
        "get_edss_documentation_enhanced": get_edss_documentation_enhanced,
    }

    for name, handler in handlers.items():
        mcp.tool(name=name, description=TOOL_DESCRIPTIONS[name])(handler)
        logger.debug(f"Registered tool: {name}")

    return handlers


def create_mcp_server(
    service: Optional[DocumentationService] = None,
    config: Optional[DocsConfig] = None
) -> FastMCP:
    """
    Create the MCP server with all documentation tools registered.

    Args:
        service: Documentation service (optional, created from config if not provided)
        config: Configuration (optional, loaded from the environment if not provided)

    Returns:
        Configured FastMCP instance
    """
    if service is None:
        service = DocumentationService(config or DocsConfig.from_env())

    mcp = FastMCP(SERVER_NAME)
    register_documentation_tools(mcp, service)
    logger.info(f"MCP server initialized for {service.config.base_url}")
    return mcp


def run_mcp_server(
    config: Optional[DocsConfig] = None,
    transport: str = "stdio",
    host: str = "localhost",
    port: int = 8000
) -> None:
    """
    Run the documentation MCP server.

    Args:
        config: Configuration (optional, loaded from the environment if not provided)
        transport: Transport type - "stdio" or "sse" (default: "stdio")
        host: Host to bind to for SSE transport (default: "localhost")
        port: Port to bind to for SSE transport (default: 8000)
    """
    try:
        logger.info("Starting JDSS documentation MCP server")
        logger.info(f"Transport: {transport}")

        mcp = create_mcp_server(config=config)

        if transport == "sse":
            logger.info(f"Starting SSE server on {host}:{port}")
            mcp.run(transport="sse", host=host, port=port)
        else:
            logger.info("Starting stdio server")
            mcp.run()

    except Exception as e:
        logger.error(f"Failed to run MCP server: {str(e)}", exc_info=True)
        raise
