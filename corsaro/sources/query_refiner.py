"""
Query Refiner
Ordered candidate queries, from most to least specific, tried until one hits.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, TypeVar
import re

from ..core.diagnostics import Diagnostics
from ..models.search_options import SearchContext

T = TypeVar("T")

_SEASON_WORD_RE = re.compile(r'Season \d+', re.IGNORECASE)
_ORDINAL_SEASON_RE = re.compile(r'\d+(?:st|nd|rd|th) Season', re.IGNORECASE)
_WHITESPACE_RE = re.compile(r'\s+')

MIN_QUERY_LENGTH = 3


@dataclass(frozen=True)
class QueryCandidate:
    query: str
    tag: str
    enabled: bool
    skip_reason: str = ""


def clean_query(query: str) -> str:
    """Drop season markers and collapse whitespace; keep the original if too little survives."""
    cleaned = _SEASON_WORD_RE.sub('', query, count=1)
    cleaned = _ORDINAL_SEASON_RE.sub('', cleaned, count=1)
    cleaned = _WHITESPACE_RE.sub(' ', cleaned.strip())
    if len(cleaned) < MIN_QUERY_LENGTH:
        return query
    return cleaned


def episode_marker(episode_number: Optional[int], batch: bool = False) -> str:
    if batch or not episode_number or episode_number <= 0:
        return ""
    return f" E{episode_number:02d}"


def first_word(query: str) -> str:
    parts = query.split()
    return parts[0] if parts else ""


def build_query_candidates(context: SearchContext) -> List[QueryCandidate]:
    cleaned = clean_query(context.query)
    word = first_word(cleaned)

    refined = word
    if context.user_query and context.user_query.strip():
        refined += f" {context.user_query.strip()}"
    refined += episode_marker(context.episode_number, context.batch)

    return [
        QueryCandidate(
            query=refined,
            tag="refined",
            enabled=refined != word,
            skip_reason="" if refined != word else "adds nothing beyond the first word",
        ),
        QueryCandidate(
            query=word,
            tag="first_word",
            enabled=len(word) >= MIN_QUERY_LENGTH,
            skip_reason="" if len(word) >= MIN_QUERY_LENGTH else "first word too short",
        ),
        QueryCandidate(
            query=cleaned,
            tag="full",
            enabled=cleaned != word,
            skip_reason="" if cleaned != word else "same as the first word",
        ),
    ]


def first_successful(
    candidates: Sequence[QueryCandidate],
    search: Callable[[str], List[T]],
    diagnostics: Optional[Diagnostics] = None,
) -> List[T]:
    """Run enabled candidates in order; return the first non-empty result list."""
    diagnostics = diagnostics or Diagnostics()
    for candidate in candidates:
        if not candidate.enabled:
            diagnostics.debug("query_skipped", tag=candidate.tag, query=candidate.query,
                              reason=candidate.skip_reason)
            continue
        diagnostics.info("query_candidate", tag=candidate.tag, query=candidate.query)
        results = search(candidate.query)
        if results:
            return results
    return []
