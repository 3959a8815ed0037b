"""
Search Options
Host-side option objects passed to the provider contract
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Media:
    english_title: Optional[str] = None
    romaji_title: Optional[str] = None
    synonyms: List[str] = field(default_factory=list)

    def preferred_title(self) -> str:
        """English title, else romanized, else first synonym."""
        if self.english_title:
            return self.english_title
        if self.romaji_title:
            return self.romaji_title
        if self.synonyms and self.synonyms[0]:
            return self.synonyms[0]
        return ""


@dataclass
class AnimeSearchOptions:
    query: str = ""


@dataclass
class AnimeSmartSearchOptions:
    media: Media = field(default_factory=Media)
    query: Optional[str] = None
    batch: bool = False
    episode_number: int = 0


@dataclass(frozen=True)
class SearchContext:
    """Working values of a single search call."""
    query: str
    user_query: Optional[str] = None
    episode_number: Optional[int] = None
    batch: bool = False


@dataclass(frozen=True)
class ProviderSettings:
    can_smart_search: bool
    smart_search_filters: List[str]
    supports_adult: bool
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canSmartSearch": self.can_smart_search,
            "smartSearchFilters": list(self.smart_search_filters),
            "supportsAdult": self.supports_adult,
            "type": self.type,
        }
