"""Documentation operations composed from discovery, fetching and extraction."""

import asyncio
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Dict, Optional

from .archive import extract_primary
from .comparator import FOCUS_OPTIONS, compare_content
from .exceptions import FetchError
from .extractor import (
    extract_auth_info,
    extract_endpoint_candidates,
    extract_endpoints,
    extract_http_methods,
    extract_section,
)
from .fetcher import DocumentFetcher
from .link_discovery import LinkDiscovery, resolve_version
from .models import ComparisonResult, DocsConfig, DocumentPayload, DownloadInfo, VersionDescriptor
from .revealer import HtmlRevealer, create_revealer, reveal_archive
from .search import search


logger = logging.getLogger(__name__)

SEARCH_VERSIONS = ('latest', 'trunk', 'both')


class DocumentationService:
    """
    Entry point for every documentation operation.

    Owns the link discovery cache; page content is fetched fresh for each
    call. Errors from fetching, extraction and reveal propagate to the caller.
    """

    def __init__(
        self,
        config: Optional[DocsConfig] = None,
        fetcher: Optional[DocumentFetcher] = None,
        revealer: Optional[HtmlRevealer] = None
    ):
        self.config = config or DocsConfig()
        self.fetcher = fetcher or DocumentFetcher(config=self.config)
        self.revealer = revealer or create_revealer(self.config)
        self.discovery = LinkDiscovery(self.fetcher, self.config)

    async def aclose(self) -> None:
        await self.fetcher.aclose()

    async def resolve(self, version: str = 'latest', api_version: str = 'v4') -> VersionDescriptor:
        registry = await self.discovery.discover_links()
        return resolve_version(registry, version, api_version)

    async def fetch_version(self, version: str = 'latest', api_version: str = 'v4') -> DocumentPayload:
        """Fetch the documentation page of a version."""
        descriptor = await self.resolve(version, api_version)
        logger.info(f"Fetching {version} documentation from {descriptor.page_url}")
        return await self.fetcher.fetch_document(version, descriptor.page_url)

    async def discover_links(self, refresh: bool = False) -> Dict[str, object]:
        registry = await self.discovery.discover_links(force_refresh=refresh)
        return {
            "links": registry.to_dict(),
            "discoveredAt": registry.discovered_at.isoformat(),
            "totalFound": len(registry),
            "legacy": registry.from_legacy,
        }

    async def get_documentation(
        self,
        version: str = 'latest',
        section: Optional[str] = None,
        api_version: str = 'v4'
    ) -> str:
        """
        Return a documentation page, or one section of it.

        Args:
            version: 'latest', 'trunk' or a release name
            section: Optional heading text of the section to return
            api_version: 'v3' or 'v4'
        """
        payload = await self.fetch_version(version, api_version)
        if not section:
            return payload.raw_content
        found = extract_section(payload.raw_content, section)
        return found if found is not None else f'Section "{section}" not found'

    async def get_documentation_enhanced(
        self,
        version: str = 'latest',
        api_version: str = 'v4',
        use_javascript: bool = True
    ) -> str:
        """
        Download the ZIP archive of a version and return its HTML.

        With ``use_javascript`` the page is run through the revealer so that
        content hidden behind toggles is included.
        """
        descriptor = await self.resolve(version, api_version)
        zip_bytes = await self.fetcher.fetch_zip(descriptor.zip_url)

        if use_javascript:
            html = await reveal_archive(zip_bytes, self.revealer)
            return (
                f"Enhanced EDSS Documentation ({descriptor.release} {api_version})\n"
                f"Source: {descriptor.zip_url}\n"
                f"Processed with jQuery: YES\n\n"
                f"{html}"
            )

        contents = extract_primary(zip_bytes)
        return (
            f"EDSS Documentation ({descriptor.release} {api_version})\n"
            f"Source: {descriptor.zip_url}\n\n"
            f"{contents.html}"
        )

    async def download_info(self, version: str = 'latest', api_version: str = 'v4') -> DownloadInfo:
        """ZIP download URL of a version with HEAD metadata when reachable."""
        descriptor = await self.resolve(version, api_version)
        info = DownloadInfo(
            version=version,
            release=descriptor.release,
            api_version=descriptor.api_version,
            zip_url=descriptor.zip_url,
            accessible=False,
        )
        try:
            metadata = await self.fetcher.fetch_metadata(descriptor.zip_url)
        except FetchError as e:
            info.status_code = e.status_code
            info.error = str(e)
            return info

        info.accessible = True
        info.status_code = metadata['status_code']
        info.content_type = metadata['content_type']
        info.size = metadata['size']
        info.last_modified = metadata['last_modified']
        return info

    async def search_documentation(self, query: str, version: str = 'latest') -> Dict[str, object]:
        """
        Search one or both versions for a literal term.

        Raises:
            ValueError: If the query is empty or the version is unknown
        """
        if not query or not query.strip():
            raise ValueError("Query cannot be empty")
        if version not in SEARCH_VERSIONS:
            raise ValueError(f"Invalid version: {version}. Must be one of {', '.join(SEARCH_VERSIONS)}")

        versions = ['latest', 'trunk'] if version == 'both' else [version]
        payloads = await asyncio.gather(*(self.fetch_version(v) for v in versions))

        results = []
        for payload in payloads:
            results.extend(asdict(m) for m in search(payload.raw_content, query, version=payload.version))

        return {"query": query, "results": results, "total": len(results)}

    async def analyze_endpoints(
        self,
        version: str = 'latest',
        detailed: bool = False,
        api_version: str = 'v4'
    ) -> Dict[str, object]:
        """Extract endpoints, HTTP methods and authentication hints from a version."""
        payload = await self.fetch_version(version, api_version)
        content = payload.raw_content
        endpoints = extract_endpoints(content, detailed)
        auth = extract_auth_info(content)

        return {
            "version": version,
            "url": payload.url,
            "documentLength": payload.length,
            "endpoints": [e.to_dict() for e in endpoints],
            "total": len(endpoints),
            "detailed": detailed,
            "methods": sorted(extract_http_methods(content)),
            "candidates": extract_endpoint_candidates(content),
            "authentication": asdict(auth),
        }

    async def compare_versions(self, focus: str = 'summary', api_version: str = 'v4') -> ComparisonResult:
        """Fetch latest and trunk concurrently and compare them."""
        if focus not in FOCUS_OPTIONS:
            raise ValueError(f"Invalid focus: {focus}. Must be one of {', '.join(FOCUS_OPTIONS)}")
        latest, trunk = await asyncio.gather(
            self.fetch_version('latest', api_version),
            self.fetch_version('trunk', api_version),
        )
        return compare_content(latest.raw_content, trunk.raw_content, focus)


def analysis_snapshot(payload: DocumentPayload) -> Dict[str, object]:
    """Summary of a fetched page as written by the explore command."""
    auth = extract_auth_info(payload.raw_content)
    return {
        "version": payload.version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "url": payload.url,
        "endpoints": extract_endpoint_candidates(payload.raw_content),
        "methods": sorted(extract_http_methods(payload.raw_content)),
        "hasAuthentication": auth.found,
        "authKeywords": auth.keywords,
        "documentLength": payload.length,
    }
