"""Exception hierarchy for documentation retrieval and processing."""

from typing import Optional


class DocsError(Exception):
    """Base class for documentation server errors."""


class FetchError(DocsError):
    """HTTP request failed or returned a non-success status."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ExtractionError(DocsError):
    """Archive could not be read or contains no HTML document."""


class ProcessingError(DocsError):
    """Content reveal environment is unavailable."""


class VersionNotFoundError(DocsError):
    """No registry entry matches the requested version."""

    def __init__(self, version: str, api_version: str):
        self.version = version
        self.api_version = api_version
        super().__init__(
            f"Could not find documentation for version: {version}, apiVersion: {api_version}"
        )
