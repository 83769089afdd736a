"""Heuristic extraction of endpoints, methods and auth hints from documentation.

All extraction works on raw HTML/text with regular expressions. Results are
best-effort: context windows have fixed sizes and are not scoped to the
documentation block of an endpoint.
"""

import re
from typing import List, Optional, Set

from .models import AuthInfo, EndpointRecord, Parameter


HTTP_METHODS = ('GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'HEAD', 'OPTIONS')

AUTH_KEYWORDS = ('authentication', 'token', 'api key', 'bearer', 'authorization')

DESCRIPTION_WINDOW = 200
PARAMETER_WINDOW = 500

_METHODS_GROUP = '|'.join(HTTP_METHODS)

# Unanchored on both sides: "TARGET /x" yields GET /x and the path token
# need not start with a slash.
ENDPOINT_PATTERN = re.compile(r'(' + _METHODS_GROUP + r')\s+([/\w\-{}.]+)')

HTTP_METHOD_PATTERN = re.compile(r'\b(' + _METHODS_GROUP + r')\b')

# Applied in order; matches are pooled as raw strings.
CANDIDATE_PATTERNS = (
    re.compile(r'/api/v?\d*/[\w/\-{}]+', re.IGNORECASE),
    re.compile(r'endpoint[:\s]+/[\w/\-{}]+', re.IGNORECASE),
    re.compile(r'url[:\s]+/api/[\w/\-{}]+', re.IGNORECASE),
    re.compile(r'(?:GET|POST|PUT|DELETE|PATCH)\s+/[\w/\-{}]+', re.IGNORECASE),
)

_PARAGRAPH_PATTERN = re.compile(r'<p[^>]*>(.*?)</p>', re.IGNORECASE | re.DOTALL)
_PARAMETER_PATTERN = re.compile(r'"([^"]+)"\s*:\s*"([^"]+)"')
_TAG_PATTERN = re.compile(r'<[^>]+>')


def extract_endpoints(html: str, detailed: bool = False) -> List[EndpointRecord]:
    """
    Extract ``METHOD path`` pairs in text order.

    The method token is matched case-sensitively but without word
    boundaries, so the heuristic also fires on prose such as
    "GET requests." (path ``requests.``).

    Args:
        html: Documentation markup or text
        detailed: Also attach a description and parameter list to each endpoint

    Returns:
        List of EndpointRecord, one per occurrence
    """
    endpoints = []
    for match in ENDPOINT_PATTERN.finditer(html):
        endpoint = EndpointRecord(method=match.group(1), path=match.group(2))
        if detailed:
            endpoint.description = extract_endpoint_description(html, match.start())
            endpoint.parameters = extract_parameters(html, match.start())
        endpoints.append(endpoint)
    return endpoints


def extract_endpoint_description(html: str, index: int) -> str:
    """Text of the nearest paragraph ending within the window before ``index``."""
    before = html[max(0, index - DESCRIPTION_WINDOW):index]
    paragraphs = _PARAGRAPH_PATTERN.findall(before)
    if not paragraphs:
        return ''
    return _TAG_PATTERN.sub('', paragraphs[-1]).strip()


def extract_parameters(html: str, index: int) -> List[Parameter]:
    """``"key": "value"`` pairs within the window starting at ``index``."""
    after = html[index:index + PARAMETER_WINDOW]
    return [Parameter(name=name, type=value) for name, value in _PARAMETER_PATTERN.findall(after)]


def extract_endpoint_candidates(html: str) -> List[str]:
    """
    Pool the matches of every candidate pattern.

    Duplicates are removed by exact string, keeping first occurrence. The
    same endpoint matched by two patterns appears twice in different forms,
    e.g. ``/api/v4/pools`` and ``GET /api/v4/pools``.
    """
    pooled = []
    for pattern in CANDIDATE_PATTERNS:
        pooled.extend(pattern.findall(html))
    return list(dict.fromkeys(pooled))


def extract_http_methods(html: str) -> Set[str]:
    """Set of HTTP method tokens appearing anywhere in the text."""
    return set(HTTP_METHOD_PATTERN.findall(html))


def extract_auth_info(html: str) -> AuthInfo:
    """Check the document for authentication keywords (case-insensitive)."""
    lowered = html.lower()
    keywords = [keyword for keyword in AUTH_KEYWORDS if keyword in lowered]
    return AuthInfo(found=bool(keywords), keywords=keywords)


def extract_section(html: str, section: str) -> Optional[str]:
    """
    Return the markup from the heading starting with ``section`` up to the next heading.

    Args:
        html: Documentation markup
        section: Heading text to look for (matched literally, case-insensitive)

    Returns:
        Section markup, or None if no heading matches
    """
    pattern = re.compile(
        r'<h[1-6][^>]*>' + re.escape(section) + r'.*?</h[1-6]>.*?(?=<h[1-6]|$)',
        re.IGNORECASE | re.DOTALL
    )
    match = pattern.search(html)
    return match.group(0) if match else None
