"""HTTP retrieval of documentation pages and ZIP archives."""

import logging
from typing import Dict, Optional

import httpx

from .exceptions import FetchError
from .models import DocsConfig, DocumentPayload


logger = logging.getLogger(__name__)

USER_AGENT = 'JDSS-REST-Doc-MCP/0.1.0'


class DocumentFetcher:
    """
    Fetches documentation content over HTTP.

    Every failure (transport error or non-2xx status) is raised as
    FetchError. There are no retries; callers report the failure.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, config: Optional[DocsConfig] = None):
        """
        Initialize the fetcher.

        Args:
            client: HTTP client to use. If None, one is created and owned by the fetcher.
            config: Server configuration (used for the timeout of an owned client)
        """
        self.config = config or DocsConfig()
        self._owns_client = client is None
        if client is None:
            client_args = {'headers': {'User-Agent': USER_AGENT}, 'follow_redirects': True}
            if self.config.timeout is not None:
                client_args['timeout'] = self.config.timeout
            client = httpx.AsyncClient(**client_args)
        self.client = client

    async def __aenter__(self) -> 'DocumentFetcher':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _request(self, method: str, url: str) -> httpx.Response:
        try:
            response = await self.client.request(method, url)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP error {status} fetching {url}")
            raise FetchError(url, f"Failed to fetch {url}: {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error(f"Network error fetching {url}: {e}")
            raise FetchError(url, f"Failed to fetch {url}: {e}") from e

    async def fetch_page(self, url: str) -> str:
        """
        Fetch a documentation page as text.

        Raises:
            FetchError: On network errors or non-success HTTP status
        """
        response = await self._request('GET', url)
        logger.debug(f"Fetched {len(response.text)} characters from {url}")
        return response.text

    async def fetch_zip(self, url: str) -> bytes:
        """
        Fetch a documentation ZIP archive as raw bytes.

        Raises:
            FetchError: On network errors or non-success HTTP status
        """
        response = await self._request('GET', url)
        logger.debug(f"Downloaded {len(response.content)} bytes from {url}")
        return response.content

    async def fetch_metadata(self, url: str) -> Dict[str, object]:
        """
        Issue a HEAD request and return basic metadata for a resource.

        Returns:
            Dictionary with status_code, content_type, size and last_modified
        """
        response = await self._request('HEAD', url)
        length = response.headers.get('content-length')
        return {
            'status_code': response.status_code,
            'content_type': response.headers.get('content-type'),
            'size': int(length) if length and length.isdigit() else None,
            'last_modified': response.headers.get('last-modified'),
        }

    async def fetch_document(self, version: str, url: str) -> DocumentPayload:
        """Fetch a page and wrap it as a DocumentPayload."""
        content = await self.fetch_page(url)
        return DocumentPayload(version=version, url=url, raw_content=content)
