"""
Diagnostics
Injected sink for pipeline events (severity + message + structured context).
"""
from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional
import threading

from .event_bus import EventBus, Events

LEVELS = ("debug", "info", "warning", "error")


class Diagnostics:
    """Base sink. Records are dropped unless a subclass handles them."""

    def record(self, level: str, message: str, **context: Any) -> None:
        return None

    def debug(self, message: str, **context: Any) -> None:
        self.record("debug", message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.record("info", message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.record("warning", message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.record("error", message, **context)


class ConsoleDiagnostics(Diagnostics):
    """Prints one line per record to stdout."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def record(self, level: str, message: str, **context: Any) -> None:
        if level == "debug" and not self.verbose:
            return
        ts = datetime.now().strftime("[%Y-%m-%d %H:%M:%S]")
        level_tag = f" {level.upper()}" if level != "info" else ""
        details = " | ".join(f"{k}={v}" for k, v in context.items() if v is not None)
        line = f"{ts}{level_tag} {message}"
        if details:
            line = f"{line} | {details}"
        print(line, flush=True)


class BufferedDiagnostics(Diagnostics):
    """
    Ring buffer of the last N structured records.
    Thread-safe so concurrent searches can share one instance.
    """

    def __init__(self, max_entries: int = 500):
        self._lock = threading.Lock()
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=max_entries)
        self._next_id = 0

    def record(self, level: str, message: str, **context: Any) -> None:
        with self._lock:
            self._next_id += 1
            entry = {
                "id": self._next_id,
                "timestamp": datetime.now().isoformat(),
                "level": level,
                "message": message,
                "data": {k: v for k, v in context.items() if v is not None},
            }
            self._entries.append(entry)

    def entries(self, level: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Oldest first; optionally filtered by level and truncated to the newest `limit`."""
        with self._lock:
            snapshot = list(self._entries)
        if level:
            snapshot = [e for e in snapshot if e["level"] == level.lower()]
        if limit is not None:
            snapshot = snapshot[-limit:] if limit > 0 else []
        return snapshot

    def messages(self) -> List[str]:
        return [e["message"] for e in self.entries()]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class EventBusDiagnostics(Diagnostics):
    """Forwards records to an EventBus as PROVIDER_DIAGNOSTIC events."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus

    def record(self, level: str, message: str, **context: Any) -> None:
        self.event_bus.emit(Events.PROVIDER_DIAGNOSTIC, {
            "level": level,
            "message": message,
            "data": dict(context),
        })


class FanOutDiagnostics(Diagnostics):
    def __init__(self, *sinks: Diagnostics):
        self.sinks = list(sinks)

    def record(self, level: str, message: str, **context: Any) -> None:
        for sink in self.sinks:
            sink.record(level, message, **context)
