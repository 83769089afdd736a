"""
JDSS-REST-Doc-MCP: Expose the JDSS REST API documentation as MCP tools.

This package discovers published documentation versions on the
documentation host, fetches pages and ZIP downloads, reveals content hidden
behind client-side toggles, and extracts endpoints for AI coding assistants
through the Model Context Protocol (MCP).
"""

__version__ = "0.1.0"

from .models import (
    DocsConfig,
    VersionDescriptor,
    LinkRegistry,
    DocumentPayload,
    EndpointRecord,
    SearchMatch,
    ComparisonResult
)
from .exceptions import DocsError, FetchError, ExtractionError, ProcessingError
from .service import DocumentationService

__all__ = [
    "DocsConfig",
    "VersionDescriptor",
    "LinkRegistry",
    "DocumentPayload",
    "EndpointRecord",
    "SearchMatch",
    "ComparisonResult",
    "DocsError",
    "FetchError",
    "ExtractionError",
    "ProcessingError",
    "DocumentationService"
]
