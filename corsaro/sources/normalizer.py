"""
Normalizer
Maps scraped rows to the host's AnimeTorrent record.
"""
from __future__ import annotations

from urllib.parse import urljoin

from ..models.torrent import AnimeTorrent, RawTorrent
from ..utils.title_metadata import parse_title_metadata


def absolute_url(base_url: str, link: str) -> str:
    if not link:
        return ""
    if link.startswith("http://") or link.startswith("https://"):
        return link
    return urljoin(base_url.rstrip("/") + "/", link)


def to_anime_torrent(torrent: RawTorrent, base_url: str, confirmed: bool = False) -> AnimeTorrent:
    meta = parse_title_metadata(torrent.title)
    return AnimeTorrent(
        name=torrent.title,
        date=torrent.date,
        size=AnimeTorrent.parse_size(torrent.size),
        formatted_size=torrent.size,
        seeders=torrent.seeders,
        leechers=torrent.leechers,
        download_count=torrent.downloads,
        link=absolute_url(base_url, torrent.link),
        download_url=absolute_url(base_url, torrent.torrent_url) or None,
        magnet_link=torrent.magnet or None,
        info_hash=AnimeTorrent.extract_infohash(torrent.magnet),
        resolution="",
        is_batch=meta.is_batch,
        is_best_release=False,
        confirmed=confirmed,
        episode_number=meta.episode_number,
    )
