"""
Torrent Models
Raw rows scraped from the results table and the host-facing torrent record
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import base64
import binascii
import re


_SIZE_RE = re.compile(r'^([\d.]+)\s*(B|KB|MB|GB|TB)$', re.IGNORECASE)
_BTIH_RE = re.compile(r'btih:([a-zA-Z0-9]+)')


@dataclass(frozen=True)
class RawTorrent:
    """One results-table row, as scraped"""
    title: str
    link: str
    size: str  # formatted, e.g. "1.2 GB"
    seeders: int
    leechers: int
    downloads: int
    magnet: str
    torrent_url: str
    date: str  # ISO-8601


@dataclass
class AnimeTorrent:
    """Torrent record in the host's result schema"""
    name: str
    date: str
    size: int  # bytes
    formatted_size: str
    seeders: int
    leechers: int
    download_count: int
    link: str
    info_hash: str
    is_batch: bool
    confirmed: bool
    episode_number: int
    download_url: Optional[str] = None
    magnet_link: Optional[str] = None
    resolution: str = ""
    is_best_release: bool = False

    @staticmethod
    def extract_infohash(magnet: str) -> str:
        """
        Extract the btih hash from a magnet link as lowercase hex.
        Base32 hashes (32 chars) are converted to their hex form.
        """
        match = _BTIH_RE.search(magnet or "")
        if not match:
            return ""
        value = match.group(1)
        if len(value) == 40 and re.fullmatch(r'[a-fA-F0-9]{40}', value):
            return value.lower()
        if len(value) == 32:
            try:
                return base64.b32decode(value.upper()).hex()
            except (binascii.Error, ValueError):
                return ""
        return ""

    @staticmethod
    def parse_size(size_str: str) -> int:
        """
        Parse a size string to bytes using binary multiples
        Handles: "1.2 GB", "500MB", "12 kb"
        """
        match = _SIZE_RE.match((size_str or "").strip())
        if not match:
            return 0

        try:
            value = float(match.group(1))
        except ValueError:
            return 0

        multipliers = {
            'B': 1,
            'KB': 1024,
            'MB': 1024**2,
            'GB': 1024**3,
            'TB': 1024**4,
        }
        return int(value * multipliers[match.group(2).upper()] + 0.5)

    @staticmethod
    def format_size(bytes_size: int) -> str:
        """Format bytes to human readable size"""
        value = float(bytes_size)
        for unit in ['B', 'KB', 'MB', 'GB']:
            if value < 1024.0:
                return f"{value:.2f} {unit}"
            value /= 1024.0
        return f"{value:.2f} TB"

    def to_dict(self) -> Dict[str, Any]:
        """Host schema payload (camelCase keys)"""
        return {
            "name": self.name,
            "date": self.date,
            "size": self.size,
            "formattedSize": self.formatted_size,
            "seeders": self.seeders,
            "leechers": self.leechers,
            "downloadCount": self.download_count,
            "link": self.link,
            "downloadUrl": self.download_url,
            "magnetLink": self.magnet_link,
            "infoHash": self.info_hash,
            "resolution": self.resolution,
            "isBatch": self.is_batch,
            "isBestRelease": self.is_best_release,
            "confirmed": self.confirmed,
            "episodeNumber": self.episode_number,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AnimeTorrent":
        return cls(
            name=str(payload.get("name") or ""),
            date=str(payload.get("date") or ""),
            size=int(payload.get("size") or 0),
            formatted_size=str(payload.get("formattedSize") or ""),
            seeders=int(payload.get("seeders") or 0),
            leechers=int(payload.get("leechers") or 0),
            download_count=int(payload.get("downloadCount") or 0),
            link=str(payload.get("link") or ""),
            download_url=payload.get("downloadUrl") or None,
            magnet_link=payload.get("magnetLink") or None,
            info_hash=str(payload.get("infoHash") or ""),
            resolution=str(payload.get("resolution") or ""),
            is_batch=bool(payload.get("isBatch", False)),
            is_best_release=bool(payload.get("isBestRelease", False)),
            confirmed=bool(payload.get("confirmed", False)),
            episode_number=int(payload.get("episodeNumber", -1)),
        )
