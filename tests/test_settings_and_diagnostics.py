import unittest

from corsaro.core.diagnostics import (
    BufferedDiagnostics,
    ConsoleDiagnostics,
    Diagnostics,
    EventBusDiagnostics,
    FanOutDiagnostics,
)
from corsaro.core.event_bus import EventBus, Events
from corsaro.core.settings_manager import SettingsManager


class TestSettingsManager(unittest.TestCase):
    def setUp(self):
        self.bus = EventBus()
        self.changes = []
        self.bus.subscribe(Events.SETTINGS_CHANGED, self.changes.append)

    def test_defaults_and_overrides(self):
        settings = SettingsManager({"base_url": "https://mirror.example.org"})
        self.assertEqual(settings.get("base_url"), "https://mirror.example.org")
        self.assertEqual(settings.get("search_path"), "/search/?q=")
        self.assertIsNone(settings.get("request_timeout_seconds"))
        self.assertEqual(settings.get("missing", "fallback"), "fallback")

    def test_writes_emit_settings_changed(self):
        settings = SettingsManager(event_bus=self.bus)
        settings.set("request_timeout_seconds", 5)
        settings.update({"base_url": "https://a.example.org", "results_table_id": "t"})
        self.assertEqual(self.changes[0], {"request_timeout_seconds": 5})
        self.assertEqual(self.changes[1], {"base_url": "https://a.example.org", "results_table_id": "t"})

    def test_get_all_returns_a_copy(self):
        settings = SettingsManager()
        snapshot = settings.get_all()
        snapshot["allowed_categories"].append("Musica")
        self.assertNotIn("Musica", settings.get("allowed_categories"))

    def test_reset_restores_defaults(self):
        settings = SettingsManager({"base_url": "https://x.example.org"}, event_bus=self.bus)
        settings.reset()
        self.assertEqual(settings.get("base_url"), SettingsManager.DEFAULT_SETTINGS["base_url"])
        self.assertEqual(len(self.changes), 1)


class TestEventBus(unittest.TestCase):
    def test_failing_handler_does_not_stop_others(self):
        bus = EventBus()
        seen = []

        def broken(_data):
            raise RuntimeError("boom")

        bus.subscribe("evt", broken)
        bus.subscribe("evt", seen.append)
        bus.emit("evt", 1)
        self.assertEqual(seen, [1])

    def test_unsubscribe_and_duplicate_subscribe(self):
        bus = EventBus()
        seen = []
        bus.subscribe("evt", seen.append)
        bus.subscribe("evt", seen.append)
        bus.emit("evt", "a")
        bus.unsubscribe("evt", seen.append)
        bus.emit("evt", "b")
        self.assertEqual(seen, ["a"])


class TestDiagnostics(unittest.TestCase):
    def test_base_sink_drops_records(self):
        Diagnostics().error("anything", reason="ignored")

    def test_buffer_keeps_newest_entries(self):
        buffer = BufferedDiagnostics(max_entries=3)
        for i in range(5):
            buffer.info("event", index=i)
        entries = buffer.entries()
        self.assertEqual([e["data"]["index"] for e in entries], [2, 3, 4])
        self.assertEqual([e["id"] for e in entries], [3, 4, 5])

    def test_buffer_filters_by_level_and_limit(self):
        buffer = BufferedDiagnostics()
        buffer.debug("a")
        buffer.warning("b")
        buffer.error("c", url="https://example.org", reason=None)
        buffer.error("d")
        self.assertEqual([e["message"] for e in buffer.entries(level="ERROR")], ["c", "d"])
        self.assertEqual([e["message"] for e in buffer.entries(limit=2)], ["c", "d"])
        self.assertEqual(buffer.entries(limit=0), [])
        self.assertEqual(buffer.entries(level="error")[0]["data"], {"url": "https://example.org"})

    def test_clear(self):
        buffer = BufferedDiagnostics()
        buffer.info("a")
        buffer.clear()
        self.assertEqual(buffer.messages(), [])

    def test_event_bus_sink(self):
        bus = EventBus()
        seen = []
        bus.subscribe(Events.PROVIDER_DIAGNOSTIC, seen.append)
        EventBusDiagnostics(bus).warning("parse_failure", reason="no table")
        self.assertEqual(seen, [{"level": "warning", "message": "parse_failure", "data": {"reason": "no table"}}])

    def test_fan_out_reaches_every_sink(self):
        first, second = BufferedDiagnostics(), BufferedDiagnostics()
        FanOutDiagnostics(first, second, ConsoleDiagnostics()).debug("query_skipped", tag="full")
        self.assertEqual(first.messages(), ["query_skipped"])
        self.assertEqual(second.messages(), ["query_skipped"])


if __name__ == "__main__":
    unittest.main()
