"""Runtime bootstrap for the Corsaro web API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.diagnostics import BufferedDiagnostics, ConsoleDiagnostics, EventBusDiagnostics, FanOutDiagnostics
from ..core.event_bus import EventBus, Events
from ..core.settings_manager import SettingsManager
from ..sources.ilcorsaronero import IlCorsaroNeroProvider


@dataclass
class CorsaroRuntime:
    """Shared service graph used by web endpoints."""

    settings: SettingsManager
    event_bus: EventBus
    diagnostics: BufferedDiagnostics
    provider: IlCorsaroNeroProvider


def build_runtime(overrides: Optional[Dict[str, Any]] = None, verbose: bool = False) -> CorsaroRuntime:
    """Create and wire core services."""

    event_bus = EventBus()
    settings = SettingsManager(overrides, event_bus=event_bus)
    buffer = BufferedDiagnostics()
    diagnostics = FanOutDiagnostics(
        ConsoleDiagnostics(verbose=verbose),
        buffer,
        EventBusDiagnostics(event_bus),
    )
    provider = IlCorsaroNeroProvider(settings, diagnostics=diagnostics)
    event_bus.subscribe(Events.SETTINGS_CHANGED, lambda _changed: provider.reload_from_settings())

    return CorsaroRuntime(
        settings=settings,
        event_bus=event_bus,
        diagnostics=buffer,
        provider=provider,
    )
