"""Tests for recoflag.config.logging — console and JSON formatters."""

import json
import logging

from recoflag.config.logging import ConsoleFormatter, JSONFormatter, record_extras


def _record(message="Fetched 2 flags", **extra):
    record = logging.LogRecord("recoflag.test", logging.INFO, __file__, 1, message, None, None)
    record.__dict__.update(extra)
    return record


class TestRecordExtras:
    def test_only_user_fields(self):
        assert record_extras(_record(tag="fetchFlags", payload={"a": 1})) == {
            "tag": "fetchFlags",
            "payload": {"a": 1},
        }
        assert record_extras(_record()) == {}


class TestConsoleFormatter:
    def test_tag_prefix_and_compact_payload(self):
        line = ConsoleFormatter().format(_record(tag="fetchFlags", payload={"a": [1, 2]}))
        assert "INFO" in line
        assert line.endswith('[fetchFlags] Fetched 2 flags {"a":[1,2]}')

    def test_plain_extras(self):
        line = ConsoleFormatter().format(_record("Request failed", reason="configuration"))
        assert line.endswith("Request failed reason=configuration")


class TestJSONFormatter:
    def test_merges_extras(self):
        entry = json.loads(JSONFormatter().format(_record(tag="start", payload={"envId": "e1"})))
        assert entry["message"] == "[start] Fetched 2 flags"
        assert entry["logger"] == "recoflag.test"
        assert entry["payload"] == {"envId": "e1"}
        assert entry["timestamp"].endswith("+00:00")
