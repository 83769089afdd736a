"""Discovery of documentation versions from the documentation host index page.

The index page lists one anchor per published release and API version, e.g.
``docs/EDSS/JEFFERSONVILLE/documentation/v4/``. Discovered links are kept in
a time-bounded cache owned by the LinkDiscovery instance.
"""

import logging
import re
import time
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from bs4 import BeautifulSoup

from .exceptions import FetchError, VersionNotFoundError
from .fetcher import DocumentFetcher
from .models import DocsConfig, LinkRegistry, VersionDescriptor


logger = logging.getLogger(__name__)

ZIP_SUFFIX = 'get_doc.php?t=zip'
LEGACY_RELEASE = 'JEFFERSONVILLE'


class LinkCache:
    """Holds one LinkRegistry for a fixed time-to-live."""

    def __init__(self, ttl_seconds: float = 600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._registry: Optional[LinkRegistry] = None
        self._stored_at: Optional[float] = None

    def age(self) -> Optional[float]:
        if self._stored_at is None:
            return None
        return self._clock() - self._stored_at

    def get(self) -> Optional[LinkRegistry]:
        """Return the cached registry, or None when empty or expired."""
        age = self.age()
        if self._registry is None or age is None or age >= self.ttl_seconds:
            return None
        return self._registry

    def store(self, registry: LinkRegistry) -> None:
        self._registry = registry
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        self._registry = None
        self._stored_at = None


def zip_url_for(page_url: str) -> str:
    """Derive the ZIP download URL of a documentation page."""
    return page_url + ('' if page_url.endswith('/') else '/') + ZIP_SUFFIX


def _absolute_url(href: str, base_url: str) -> str:
    if href.startswith('http'):
        return href
    return base_url + (href[1:] if href.startswith('/') else href)


def parse_documentation_links(html: str, base_url: str, product: str = 'EDSS') -> LinkRegistry:
    """
    Build a registry from the anchors of the documentation index page.

    Anchors are visited in document order. Every release other than trunk
    also overwrites the ``latest_<apiVersion>`` alias, so the alias points to
    the last such release on the page.

    Args:
        html: Markup of the index page
        base_url: Root URL used to resolve relative links (must end with '/')
        product: Product path segment under docs/

    Returns:
        LinkRegistry, empty when no anchor matches
    """
    pattern = re.compile(
        r'docs/' + re.escape(product) + r'/([^/]+)/documentation/(v[34])/?$'
    )
    soup = BeautifulSoup(html, 'lxml')
    links = {}

    for a_tag in soup.find_all('a', href=True):
        href = a_tag['href'].strip()
        match = pattern.search(href)
        if not match:
            continue

        release, api_version = match.group(1), match.group(2)
        page_url = _absolute_url(href, base_url)
        descriptor = VersionDescriptor(
            release=release,
            api_version=api_version,
            page_url=page_url,
            zip_url=zip_url_for(page_url),
            link_text=a_tag.get_text(strip=True),
            discovered=True,
        )
        links[descriptor.key] = descriptor

        if release != 'trunk':
            links[f"latest_{api_version}"] = replace(descriptor)

    return LinkRegistry(links=links, discovered_at=datetime.now())


def build_legacy_registry(base_url: str, product: str = 'EDSS') -> LinkRegistry:
    """Static registry used when the index page cannot be fetched."""
    latest_url = f"{base_url}docs/{product}/{LEGACY_RELEASE}/documentation/v4/"
    trunk_url = f"{base_url}docs/{product}/trunk/documentation/v4/"
    return LinkRegistry(
        links={
            'latest_v4': VersionDescriptor(
                release=LEGACY_RELEASE,
                api_version='v4',
                page_url=latest_url,
                zip_url=zip_url_for(latest_url),
                link_text='Legacy Latest',
                discovered=False,
            ),
            'trunk_v4': VersionDescriptor(
                release='trunk',
                api_version='v4',
                page_url=trunk_url,
                zip_url=zip_url_for(trunk_url),
                link_text='Legacy Trunk',
                discovered=False,
            ),
        },
        discovered_at=datetime.now(),
        from_legacy=True,
    )


def resolve_version(registry: LinkRegistry, version: str, api_version: str = 'v4') -> VersionDescriptor:
    """
    Find the descriptor for a version name.

    Args:
        registry: Registry to search
        version: 'latest', 'trunk' or a release name
        api_version: 'v3' or 'v4'

    Raises:
        VersionNotFoundError: If no entry matches
    """
    word = version.lower()
    descriptor = registry.get(f"{word}_{api_version}")
    if descriptor is None and word in ('latest', 'trunk'):
        # Any API version of the alias is better than nothing
        key = next((k for k in registry.keys() if word in k), None)
        descriptor = registry.get(key) if key else None
    if descriptor is None:
        raise VersionNotFoundError(version, api_version)
    return descriptor


class LinkDiscovery:
    """Discovers documentation links and caches them for the configured TTL."""

    def __init__(self, fetcher: DocumentFetcher, config: Optional[DocsConfig] = None,
                 cache: Optional[LinkCache] = None):
        self.fetcher = fetcher
        self.config = config or DocsConfig()
        self.cache = cache or LinkCache(ttl_seconds=self.config.cache_ttl)

    async def discover_links(self, force_refresh: bool = False) -> LinkRegistry:
        """
        Return the link registry, fetching the index page when needed.

        A fetch failure never propagates: the legacy registry is returned
        instead and the cache is left untouched.
        """
        if force_refresh:
            self.cache.invalidate()
        else:
            cached = self.cache.get()
            if cached is not None:
                logger.debug(f"Using cached link registry ({len(cached)} entries)")
                return cached

        try:
            html = await self.fetcher.fetch_page(self.config.base_url)
        except FetchError as e:
            logger.warning(f"Discovery failed, using legacy URLs: {e}")
            return build_legacy_registry(self.config.base_url, self.config.product)

        registry = parse_documentation_links(html, self.config.base_url, self.config.product)
        logger.info(f"Discovered {len(registry)} documentation links from {self.config.base_url}")
        self.cache.store(registry)
        return registry
