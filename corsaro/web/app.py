"""FastAPI app exposing the provider contract to web clients."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from pydantic import BaseModel

from ..core.diagnostics import LEVELS
from ..core.errors import ResolutionFailure
from ..models.search_options import AnimeSearchOptions, AnimeSmartSearchOptions, Media
from ..models.torrent import AnimeTorrent
from .runtime import CorsaroRuntime, build_runtime


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class MediaRequest(BaseModel):
    englishTitle: Optional[str] = None
    romajiTitle: Optional[str] = None
    synonyms: List[str] = []


class SmartSearchRequest(BaseModel):
    media: MediaRequest = MediaRequest()
    query: Optional[str] = None
    batch: bool = False
    episodeNumber: int = 0


class TorrentRequest(BaseModel):
    name: str = ""
    link: str = ""
    infoHash: str = ""
    magnetLink: Optional[str] = None


def _serialize_results(query: str, results: List[AnimeTorrent]) -> Dict[str, Any]:
    return {
        "query": query,
        "count": len(results),
        "results": [r.to_dict() for r in results],
    }


def _torrent_from_request(body: TorrentRequest) -> AnimeTorrent:
    return AnimeTorrent.from_dict(body.model_dump())


def create_app(runtime: Optional[CorsaroRuntime] = None) -> FastAPI:
    runtime = runtime or build_runtime()
    provider = runtime.provider

    app = FastAPI(title="Corsaro API", version="0.1.0")

    @app.get("/health")
    def health() -> Dict:
        return {"ok": True, "time": _utc_now_iso(), "provider": provider.name}

    @app.get("/api/provider/settings")
    def provider_settings() -> Dict[str, Any]:
        return provider.get_settings().to_dict()

    @app.get("/api/settings")
    def get_settings() -> Dict[str, Any]:
        return runtime.settings.get_all()

    @app.patch("/api/settings")
    def patch_settings(values: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        unknown = sorted(k for k in values if k not in runtime.settings.DEFAULT_SETTINGS)
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown settings: {', '.join(unknown)}")
        runtime.settings.update(values)
        return runtime.settings.get_all()

    @app.get("/api/search")
    def search(q: str = Query("")) -> Dict[str, Any]:
        query = (q or "").strip()
        if not query:
            raise HTTPException(status_code=400, detail="q is required")
        return _serialize_results(query, provider.search(AnimeSearchOptions(query=query)))

    @app.post("/api/smart-search")
    def smart_search(body: SmartSearchRequest) -> Dict[str, Any]:
        options = AnimeSmartSearchOptions(
            media=Media(
                english_title=body.media.englishTitle,
                romaji_title=body.media.romajiTitle,
                synonyms=list(body.media.synonyms or []),
            ),
            query=body.query,
            batch=bool(body.batch),
            episode_number=int(body.episodeNumber or 0),
        )
        return _serialize_results(body.query or "", provider.smart_search(options))

    @app.post("/api/torrents/info-hash")
    def torrent_info_hash(body: TorrentRequest) -> Dict[str, Any]:
        return {"infoHash": provider.get_torrent_info_hash(_torrent_from_request(body))}

    @app.post("/api/torrents/magnet")
    def torrent_magnet(body: TorrentRequest) -> Dict[str, Any]:
        try:
            magnet = provider.get_torrent_magnet_link(_torrent_from_request(body))
        except ResolutionFailure as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"magnetLink": magnet}

    @app.get("/api/diagnostics")
    def diagnostics(level: Optional[str] = Query(None), limit: int = Query(200)) -> Dict[str, Any]:
        if level and level.lower() not in LEVELS:
            raise HTTPException(status_code=400, detail=f"level must be one of {', '.join(LEVELS)}")
        return {"entries": runtime.diagnostics.entries(level=level, limit=max(0, limit))}

    @app.post("/api/diagnostics/clear")
    def diagnostics_clear() -> Dict[str, Any]:
        runtime.diagnostics.clear()
        return {"ok": True}

    return app


app = create_app()
