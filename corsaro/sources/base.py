"""
Provider SDK
Versioned base interface for torrent search providers.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..models.search_options import AnimeSearchOptions, AnimeSmartSearchOptions, ProviderSettings
from ..models.torrent import AnimeTorrent


class BaseProvider(ABC):
    """
    Stable provider contract consumed by the host's provider registry.
    """
    api_version = 1
    name = "UnnamedProvider"

    @abstractmethod
    def get_settings(self) -> ProviderSettings:
        """Static capability descriptor."""
        raise NotImplementedError

    @abstractmethod
    def search(self, options: AnimeSearchOptions) -> List[AnimeTorrent]:
        """Free-text search."""
        raise NotImplementedError

    @abstractmethod
    def smart_search(self, options: AnimeSmartSearchOptions) -> List[AnimeTorrent]:
        """Search driven by media metadata and episode/batch flags."""
        raise NotImplementedError

    @abstractmethod
    def get_torrent_info_hash(self, torrent: AnimeTorrent) -> str:
        raise NotImplementedError

    @abstractmethod
    def get_torrent_magnet_link(self, torrent: AnimeTorrent) -> str:
        raise NotImplementedError

    def reload_from_settings(self) -> None:
        """Optional hook called when provider settings are reloaded."""
        return None
