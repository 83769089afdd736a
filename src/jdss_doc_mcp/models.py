"""Data models for the JDSS documentation MCP server."""

import os
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv


@dataclass
class VersionDescriptor:
    """A documentation release/API-version pair and where to fetch it."""
    release: str
    api_version: str
    page_url: str
    zip_url: str
    link_text: str = ""
    discovered: bool = True

    @property
    def key(self) -> str:
        return f"{self.release.lower()}_{self.api_version}"

    def to_dict(self) -> Dict[str, object]:
        return {
            "url": self.page_url,
            "zipUrl": self.zip_url,
            "release": self.release,
            "apiVersion": self.api_version,
            "linkText": self.link_text,
            "discovered": self.discovered,
        }


@dataclass
class LinkRegistry:
    """Mapping of ``<release>_<apiVersion>`` keys to version descriptors."""
    links: Dict[str, VersionDescriptor] = field(default_factory=dict)
    discovered_at: datetime = field(default_factory=datetime.now)
    from_legacy: bool = False

    def get(self, key: str) -> Optional[VersionDescriptor]:
        return self.links.get(key)

    def keys(self) -> List[str]:
        return list(self.links.keys())

    def __len__(self) -> int:
        return len(self.links)

    def __contains__(self, key: str) -> bool:
        return key in self.links

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        return {key: descriptor.to_dict() for key, descriptor in self.links.items()}


@dataclass
class DocumentPayload:
    """Content of a documentation page fetched for a single request."""
    version: str
    url: str
    raw_content: str
    length: int = -1

    def __post_init__(self):
        if self.length < 0:
            self.length = len(self.raw_content)


@dataclass
class Parameter:
    """A name/type pair found near an endpoint."""
    name: str
    type: str


@dataclass
class EndpointRecord:
    """An HTTP endpoint found in documentation text."""
    method: Optional[str]
    path: str
    description: Optional[str] = None
    parameters: Optional[List[Parameter]] = None

    @property
    def signature(self) -> tuple:
        return (self.method, self.path)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"method": self.method, "path": self.path}
        if self.description is not None:
            data["description"] = self.description
        if self.parameters is not None:
            data["parameters"] = [asdict(p) for p in self.parameters]
        return data


@dataclass
class AuthInfo:
    """Authentication keywords found in a document."""
    found: bool
    keywords: List[str] = field(default_factory=list)


@dataclass
class SearchMatch:
    """A single search hit with surrounding context."""
    position: int
    line: int
    matched_text: str
    context: str
    version: Optional[str] = None


@dataclass
class SizeSummary:
    """Size comparison of two documentation versions."""
    latest_size: int
    trunk_size: int
    size_difference: int
    percentage_difference: Optional[float]
    identical: bool


@dataclass
class EndpointDiff:
    """Endpoints present in only one of two versions."""
    latest_count: int
    trunk_count: int
    latest_only: List[EndpointRecord] = field(default_factory=list)
    trunk_only: List[EndpointRecord] = field(default_factory=list)


@dataclass
class ComparisonResult:
    """Result of comparing the latest and trunk documentation."""
    focus: str
    timestamp: str
    summary: Optional[SizeSummary] = None
    endpoints: Optional[EndpointDiff] = None

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"timestamp": self.timestamp, "focus": self.focus}
        if self.summary is not None:
            data["summary"] = asdict(self.summary)
        if self.endpoints is not None:
            data["endpoints"] = {
                "latest_count": self.endpoints.latest_count,
                "trunk_count": self.endpoints.trunk_count,
                "latest_only": [e.to_dict() for e in self.endpoints.latest_only],
                "trunk_only": [e.to_dict() for e in self.endpoints.trunk_only],
            }
        return data


@dataclass
class DownloadInfo:
    """Download metadata for a documentation ZIP archive."""
    version: str
    release: str
    api_version: str
    zip_url: str
    accessible: bool
    content_type: Optional[str] = None
    size: Optional[int] = None
    last_modified: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[str] = None


@dataclass
class DocsConfig:
    """Configuration for the documentation server."""
    base_url: str = "http://dh.lan:777/"
    product: str = "EDSS"
    cache_ttl: float = 600.0
    timeout: Optional[float] = None
    revealer: str = "playwright"
    settle_delay: float = 1.0
    config_dir: Path = field(
        default_factory=lambda: Path.home() / ".config" / "jdss-rest-doc-mcp"
    )

    @classmethod
    def from_env(cls) -> 'DocsConfig':
        """
        Load configuration from environment variables (and a .env file).

        Environment Variables:
            JDSS_DOCS_BASE_URL: Root index page of the documentation host
            JDSS_DOCS_PRODUCT: Product path segment under docs/ (default: EDSS)
            JDSS_DOCS_CACHE_TTL: Link discovery cache lifetime in seconds (default: 600)
            JDSS_DOCS_TIMEOUT: HTTP timeout in seconds (default: httpx default)
            JDSS_DOCS_REVEALER: playwright or none (default: playwright)
            JDSS_DOCS_SETTLE_DELAY: Seconds to wait after script injection (default: 1.0)
            JDSS_DOCS_CONFIG_DIR: Directory for explorer snapshots
        """
        load_dotenv()

        base_url = os.getenv('JDSS_DOCS_BASE_URL', cls.base_url)
        if not base_url.endswith('/'):
            base_url += '/'

        timeout = os.getenv('JDSS_DOCS_TIMEOUT')
        config_dir = os.getenv('JDSS_DOCS_CONFIG_DIR')

        config = cls(
            base_url=base_url,
            product=os.getenv('JDSS_DOCS_PRODUCT', cls.product),
            cache_ttl=float(os.getenv('JDSS_DOCS_CACHE_TTL', cls.cache_ttl)),
            timeout=float(timeout) if timeout else None,
            revealer=os.getenv('JDSS_DOCS_REVEALER', cls.revealer).lower(),
            settle_delay=float(os.getenv('JDSS_DOCS_SETTLE_DELAY', cls.settle_delay)),
        )
        if config_dir:
            config.config_dir = Path(config_dir).expanduser()
        return config
