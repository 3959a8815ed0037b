"""
Title Metadata
Season / episode / batch heuristics over free-text release titles.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import re

_HAS_SEASON_RE = re.compile(r'S\d+|Season\s*\d+|Stagione\s*\d+', re.IGNORECASE)
_HAS_EPISODE_RE = re.compile(r'E\d+|Episode\s*\d+', re.IGNORECASE)

# Order is precedence. The trailing 1-3 digit fallback also fires on titles
# ending in a group tag or other bare number.
_EPISODE_PATTERNS = [
    re.compile(r'E(\d+)', re.IGNORECASE),
    re.compile(r'Episode (\d+)', re.IGNORECASE),
    re.compile(r'\b(\d{1,3})\b$'),
]

_SEASON_PATTERNS = [
    re.compile(r'S(\d+)', re.IGNORECASE),
    re.compile(r'Season (\d+)', re.IGNORECASE),
    re.compile(r'Stagione (\d+)', re.IGNORECASE),
]

_REQUESTED_SEASON_PATTERNS = [
    re.compile(r'stagione (\d+)', re.IGNORECASE),
    re.compile(r'season (\d+)', re.IGNORECASE),
    re.compile(r's(\d+)', re.IGNORECASE),
]


@dataclass(frozen=True)
class TitleMetadata:
    has_season: bool
    has_episode: bool
    episode_number: int
    season_number: int

    @property
    def is_batch(self) -> bool:
        return self.has_season and not self.has_episode


def _first_number(patterns, text: str) -> int:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return -1


def parse_title_metadata(title: str) -> TitleMetadata:
    title = title or ""
    return TitleMetadata(
        has_season=bool(_HAS_SEASON_RE.search(title)),
        has_episode=bool(_HAS_EPISODE_RE.search(title)),
        episode_number=_first_number(_EPISODE_PATTERNS, title),
        season_number=_first_number(_SEASON_PATTERNS, title),
    )


def season_numbers(title: str) -> List[int]:
    """Season number found by each season pattern, in pattern order."""
    found = []
    for pattern in _SEASON_PATTERNS:
        match = pattern.search(title or "")
        if match:
            found.append(int(match.group(1)))
    return found


def detect_requested_season(query: Optional[str]) -> int:
    """Season asked for in a free-text query ("stagione 2", "season 2", "s2"); -1 if none."""
    if not query:
        return -1
    return _first_number(_REQUESTED_SEASON_PATTERNS, query)
