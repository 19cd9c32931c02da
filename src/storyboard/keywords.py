"""Keyword normalization for outbound search queries."""

import re
from typing import Iterable, List, Optional

DEFAULT_MAX_TERMS = 8
DEFAULT_MAX_LENGTH = 100

_SEPARATORS = re.compile(r"[,\s]+")


def normalize_query(
    raw: Optional[str],
    max_terms: int = DEFAULT_MAX_TERMS,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """Turn free text or comma-separated keywords into a bounded query.

    Splits on commas and whitespace runs, keeps the first `max_terms`
    tokens, joins them with single spaces and cuts the result to
    `max_length` characters. The cut happens after the join and may end
    mid-token.

    Never raises. An empty result means there is nothing to search for.
    """
    if not raw:
        return ""
    tokens = [token for token in _SEPARATORS.split(raw) if token]
    joined = " ".join(tokens[:max(max_terms, 0)])
    return joined[:max(max_length, 0)]


def split_keywords(raw: Optional[str]) -> List[str]:
    """Split comma-separated keywords into a clean list.

    Blank entries are dropped and duplicates (case-insensitive) keep their
    first occurrence.
    """
    if not raw:
        return []
    return dedupe_keywords(raw.split(","))


def dedupe_keywords(keywords: Iterable[str]) -> List[str]:
    """Strip, drop blanks and de-duplicate keywords preserving order."""
    seen = set()
    result: List[str] = []
    for keyword in keywords:
        cleaned = " ".join(str(keyword).split())
        if not cleaned:
            continue
        key = cleaned.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(cleaned)
    return result
