"""Comparison of the latest and trunk documentation."""

from datetime import datetime, timezone
from typing import List

from .extractor import extract_endpoints
from .models import ComparisonResult, EndpointDiff, EndpointRecord, SizeSummary


FOCUS_OPTIONS = ('summary', 'changes', 'endpoints', 'all')


def size_summary(latest: str, trunk: str) -> SizeSummary:
    """
    Compare document sizes.

    The difference is ``trunk - latest`` and the percentage is relative to
    the latest document; it is None when the latest document is empty.
    """
    difference = len(trunk) - len(latest)
    percentage = round(difference / len(latest) * 100, 2) if latest else None
    return SizeSummary(
        latest_size=len(latest),
        trunk_size=len(trunk),
        size_difference=difference,
        percentage_difference=percentage,
        identical=latest == trunk,
    )


def _exclusive(side: List[EndpointRecord], other: List[EndpointRecord]) -> List[EndpointRecord]:
    other_signatures = {endpoint.signature for endpoint in other}
    seen = set()
    result = []
    for endpoint in side:
        if endpoint.signature in other_signatures or endpoint.signature in seen:
            continue
        seen.add(endpoint.signature)
        result.append(endpoint)
    return result


def endpoint_diff(latest: str, trunk: str) -> EndpointDiff:
    """Endpoints (by method and path) found in only one of the documents."""
    latest_endpoints = extract_endpoints(latest)
    trunk_endpoints = extract_endpoints(trunk)
    return EndpointDiff(
        latest_count=len(latest_endpoints),
        trunk_count=len(trunk_endpoints),
        latest_only=_exclusive(latest_endpoints, trunk_endpoints),
        trunk_only=_exclusive(trunk_endpoints, latest_endpoints),
    )


def compare_content(latest: str, trunk: str, focus: str = 'summary') -> ComparisonResult:
    """
    Compare two documentation payloads.

    Args:
        latest: Content of the latest release
        trunk: Content of trunk
        focus: 'summary', 'changes', 'endpoints' or 'all'

    Raises:
        ValueError: If focus is not one of FOCUS_OPTIONS
    """
    if focus not in FOCUS_OPTIONS:
        raise ValueError(f"Invalid focus: {focus}. Must be one of {', '.join(FOCUS_OPTIONS)}")

    result = ComparisonResult(focus=focus, timestamp=datetime.now(timezone.utc).isoformat())

    if focus in ('summary', 'changes', 'all'):
        result.summary = size_summary(latest, trunk)

    if focus in ('endpoints', 'all'):
        result.endpoints = endpoint_diff(latest, trunk)

    return result
