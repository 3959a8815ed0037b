"""
Settings Manager
In-memory provider settings layered over built-in defaults (nothing is persisted)
"""
from typing import Any, Dict, Optional
import copy
import threading

from .event_bus import EventBus, Events


class SettingsManager:
    """Manages provider settings"""

    DEFAULT_SETTINGS = {
        # Site
        "base_url": "https://ilcorsaronero.link",
        "search_path": "/search/?q=",

        # Transport (None keeps the transport's own default)
        "request_timeout_seconds": None,
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        "accept_language": "it-IT,it;q=0.9,en-US;q=0.8,en;q=0.7",

        # Results table
        "results_table_id": "main_table",
        "allowed_categories": ["Film", "Animazione", "Serie TV"],
    }

    def __init__(self, overrides: Optional[Dict[str, Any]] = None, event_bus: Optional[EventBus] = None):
        self._lock = threading.RLock()
        self._event_bus = event_bus
        self._settings: Dict[str, Any] = copy.deepcopy(self.DEFAULT_SETTINGS)
        if overrides:
            self._settings.update(overrides)

    def get(self, key: str, default=None) -> Any:
        """Get a setting value"""
        with self._lock:
            return self._settings.get(key, default)

    def set(self, key: str, value: Any):
        """Set a setting value"""
        with self._lock:
            self._settings[str(key)] = value
        self._notify({str(key): value})

    def update(self, settings_dict: Dict[str, Any]):
        """Update multiple settings at once"""
        settings_dict = dict(settings_dict or {})
        with self._lock:
            self._settings.update(settings_dict)
        self._notify(settings_dict)

    def get_all(self) -> Dict[str, Any]:
        """Get all settings"""
        with self._lock:
            return copy.deepcopy(self._settings)

    def reset(self):
        """Reset to default settings"""
        with self._lock:
            self._settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self._notify(self.get_all())

    def _notify(self, changed: Dict[str, Any]):
        if self._event_bus is not None:
            self._event_bus.emit(Events.SETTINGS_CHANGED, changed)
