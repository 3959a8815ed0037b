"""
ilCorSaRoNeRo Search Provider
Scrapes the site's HTML search results and maps them to AnimeTorrent records.

Search flow:
1. Build candidate queries (refined -> first word -> full cleaned query)
2. GET the search page for each candidate until one returns rows
3. Parse the results table, keeping film / animation / TV rows
4. Normalize rows (size, absolute links, info hash, season/episode/batch)
"""
from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

from ..core.diagnostics import ConsoleDiagnostics, Diagnostics
from ..core.errors import ResolutionFailure, TransportFailure
from ..core.settings_manager import SettingsManager
from ..models.search_options import (
    AnimeSearchOptions,
    AnimeSmartSearchOptions,
    ProviderSettings,
    SearchContext,
)
from ..models.torrent import AnimeTorrent, RawTorrent
from ..utils.title_metadata import detect_requested_season, season_numbers
from .base import BaseProvider
from .normalizer import to_anime_torrent
from .query_refiner import build_query_candidates, episode_marker, first_successful
from .results_table import ResultsTableParser, TableLayout, find_magnet_href

# Sub-delimiters left literal in the search query.
_QUERY_SAFE = "!*'()"


class IlCorsaroNeroProvider(BaseProvider):
    """ilCorSaRoNeRo torrent search provider"""

    name = "ilCorSaRoNeRo"

    SETTINGS = ProviderSettings(
        can_smart_search=True,
        smart_search_filters=["batch", "episodeNumber", "query"],
        supports_adult=False,
        type="main",
    )

    def __init__(self, settings=None, diagnostics: Optional[Diagnostics] = None,
                 session: Optional[requests.Session] = None):
        self.settings = settings if settings is not None else SettingsManager()
        self.diagnostics = diagnostics or ConsoleDiagnostics()
        self.session = session or requests.Session()
        self.base_url = SettingsManager.DEFAULT_SETTINGS["base_url"]
        self.search_path = SettingsManager.DEFAULT_SETTINGS["search_path"]
        self._timeout_seconds: Optional[float] = None
        self.parser = ResultsTableParser(diagnostics=self.diagnostics)
        self.reload_from_settings()

    def reload_from_settings(self) -> None:
        defaults = SettingsManager.DEFAULT_SETTINGS
        self.base_url = str(self.settings.get("base_url", defaults["base_url"]) or defaults["base_url"]).strip().rstrip("/")
        self.search_path = str(self.settings.get("search_path", defaults["search_path"]) or defaults["search_path"])
        timeout = self.settings.get("request_timeout_seconds", None)
        self._timeout_seconds = float(timeout) if timeout else None
        self.session.headers.update({
            'User-Agent': str(self.settings.get("user_agent", defaults["user_agent"]) or defaults["user_agent"]),
            'Accept': 'text/html,application/xhtml+xml,application/xml',
            'Accept-Language': str(self.settings.get("accept_language", defaults["accept_language"])
                                   or defaults["accept_language"]),
        })
        categories = self.settings.get("allowed_categories", None) or defaults["allowed_categories"]
        self.parser = ResultsTableParser(
            layout=TableLayout(
                table_id=str(self.settings.get("results_table_id", defaults["results_table_id"]) or ""),
                allowed_categories=tuple(categories),
            ),
            diagnostics=self.diagnostics,
        )

    def get_settings(self) -> ProviderSettings:
        return self.SETTINGS

    def search_url(self, query: str) -> str:
        return f"{self.base_url}{self.search_path}{quote(query, safe=_QUERY_SAFE)}"

    # Searching

    def search(self, options: AnimeSearchOptions) -> List[AnimeTorrent]:
        torrents = self.fetch_torrents(options.query)
        return [to_anime_torrent(t, self.base_url, confirmed=False) for t in torrents]

    def smart_search(self, options: AnimeSmartSearchOptions) -> List[AnimeTorrent]:
        query = options.media.preferred_title()
        if options.query:
            query += f" {options.query}"
        query += episode_marker(options.episode_number, options.batch)
        self.diagnostics.info("smart_search_query", query=query, batch=options.batch,
                              episode=options.episode_number)

        torrents = self.fetch_torrents(query, options.query, options.episode_number, options.batch)

        if options.batch:
            torrents = self._filter_season(torrents, detect_requested_season(options.query))

        results = [to_anime_torrent(t, self.base_url, confirmed=True) for t in torrents]

        if options.batch:
            batch_results = [r for r in results if r.is_batch]
            if batch_results:
                results = batch_results
            self.diagnostics.info("batch_filter", kept=len(batch_results), returned=len(results))
        elif options.episode_number and options.episode_number > 0:
            episode_results = [r for r in results if r.episode_number == options.episode_number]
            if episode_results:
                results = episode_results
            self.diagnostics.info("episode_filter", episode=options.episode_number,
                                  kept=len(episode_results), returned=len(results))

        return results

    def _filter_season(self, torrents: List[RawTorrent], season: int) -> List[RawTorrent]:
        if season <= 0:
            return torrents
        matching = [t for t in torrents if season in season_numbers(t.title)]
        self.diagnostics.info("season_filter", season=season, kept=len(matching), total=len(torrents))
        # An empty season match keeps everything rather than returning nothing.
        return matching or torrents

    def fetch_torrents(self, query: str, user_query: Optional[str] = None,
                       episode_number: Optional[int] = None, batch: bool = False) -> List[RawTorrent]:
        context = SearchContext(
            query=query,
            user_query=user_query,
            episode_number=episode_number,
            batch=bool(batch),
        )
        return first_successful(build_query_candidates(context), self._perform_search, self.diagnostics)

    def _perform_search(self, query: str) -> List[RawTorrent]:
        url = self.search_url(query)
        self.diagnostics.debug("search_request", query=query, url=url)
        try:
            html = self._fetch_page(url)
        except TransportFailure as e:
            self.diagnostics.error("transport_failure", query=query, url=url, reason=e.reason)
            return []

        torrents = self.parser.parse(html)
        self.diagnostics.info("search_results", query=query, count=len(torrents))
        return torrents

    def _fetch_page(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self._timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportFailure(url, str(e)) from e
        if not 200 <= response.status_code < 300:
            raise TransportFailure(url, f"Unexpected status {response.status_code}")
        return response.text

    # On-demand resolution

    def get_torrent_info_hash(self, torrent: AnimeTorrent) -> str:
        if torrent.info_hash:
            return torrent.info_hash

        if torrent.magnet_link:
            infohash = AnimeTorrent.extract_infohash(torrent.magnet_link)
            if infohash:
                return infohash

        try:
            html = self._fetch_page(torrent.link)
        except TransportFailure as e:
            self.diagnostics.error("info_hash_failure", url=torrent.link, reason=e.reason)
            return ""

        magnet = find_magnet_href(BeautifulSoup(html, "html.parser"))
        infohash = AnimeTorrent.extract_infohash(magnet)
        if not infohash:
            self.diagnostics.warning("info_hash_failure", url=torrent.link, reason="no magnet hash on page")
        return infohash

    def get_torrent_magnet_link(self, torrent: AnimeTorrent) -> str:
        if torrent.magnet_link:
            return torrent.magnet_link

        try:
            html = self._fetch_page(torrent.link)
        except TransportFailure as e:
            self.diagnostics.error("magnet_failure", url=torrent.link, reason=e.reason)
            raise ResolutionFailure(torrent.link, e.reason) from e

        magnet = find_magnet_href(BeautifulSoup(html, "html.parser"))
        if not magnet:
            self.diagnostics.error("magnet_failure", url=torrent.link, reason="Magnet link not found on page")
            raise ResolutionFailure(torrent.link, "Magnet link not found on page")
        return magnet
