"""Literal, case-insensitive search over documentation text."""

import re
from typing import List, Optional

from .models import SearchMatch


MAX_MATCHES = 50
CONTEXT_CHARS = 100


def search(
    html: str,
    query: str,
    version: Optional[str] = None,
    max_matches: int = MAX_MATCHES,
    context_chars: int = CONTEXT_CHARS
) -> List[SearchMatch]:
    """
    Find occurrences of ``query`` and capture surrounding context.

    The query is matched literally; regex metacharacters have no special
    meaning.

    Args:
        html: Text to search
        query: Search term
        version: Version label attached to each match
        max_matches: Stop after this many matches
        context_chars: Characters of context captured on each side

    Returns:
        Up to ``max_matches`` SearchMatch objects in document order

    Raises:
        ValueError: If the query is empty
    """
    if not query:
        raise ValueError("Query cannot be empty")

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    matches = []

    for match in pattern.finditer(html):
        if len(matches) >= max_matches:
            break
        start, end = match.span()
        matches.append(SearchMatch(
            position=start,
            line=html.count('\n', 0, start) + 1,
            matched_text=match.group(0),
            context=html[max(0, start - context_chars):end + context_chars].strip(),
            version=version,
        ))

    return matches
