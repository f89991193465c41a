from __future__ import annotations

from datetime import datetime

import orjson

from relaylog.formatters import PLAIN_ENCODER, ROUTER_ENCODER, ConsoleFormatter, JSONFormatter


class Opaque:
    def __str__(self) -> str:
        return "<opaque>"


class TestConsoleFormatter:
    """Aligned plain-text rendering"""

    def test_columns_and_extras(self) -> None:
        formatter = ConsoleFormatter(PLAIN_ENCODER, level_width=7, caller_width=10)
        line = formatter.format(
            {
                "timestamp": "2024-01-02 03:04:05",
                "level": "INFO",
                "caller": "pkg/mod.py:1",
                "message": "started",
                "port": 8080,
            }
        )
        assert line == "2024-01-02 03:04:05 |    INFO | ...od.py:1 | started port=8080"

    def test_fit_right_pads_and_truncates(self) -> None:
        assert ConsoleFormatter._fit_right("ab", 4) == "  ab"
        assert ConsoleFormatter._fit_right("abcdefgh", 5) == "...gh"
        assert ConsoleFormatter._fit_right("abcdefgh", 2) == "gh"
        assert ConsoleFormatter._fit_right("abc", 0) == "abc"

    def test_uses_encoder_keys(self) -> None:
        formatter = ConsoleFormatter(ROUTER_ENCODER, separator=" ")
        line = formatter.format({"time": "T", "level": "ERROR", "caller": "", "msg": "boom"})
        assert line.endswith(" boom")
        assert "msg=" not in line

    def test_renders_text_verbatim(self) -> None:
        formatter = ConsoleFormatter()
        line = formatter.format({"message": "café \\u0041", "path": "C:\\users\\new"})
        assert line.endswith("café \\u0041 path=C:\\users\\new")


class TestJSONFormatter:
    def test_fixed_keys_come_first(self) -> None:
        formatter = JSONFormatter(PLAIN_ENCODER)
        rendered = formatter.format({"extra": 1, "message": "m", "timestamp": "t", "level": "INFO"})
        assert list(orjson.loads(rendered)) == ["level", "timestamp", "message", "extra"]

    def test_non_json_values_are_stringified(self) -> None:
        rendered = JSONFormatter().format({"message": "m", "obj": Opaque(), "at": datetime(2024, 1, 2)})
        entry = orjson.loads(rendered)
        assert entry["obj"] == "<opaque>"
        assert entry["at"].startswith("2024-01-02T00:00:00")

    def test_non_string_dict_keys(self) -> None:
        rendered = JSONFormatter().format({"message": "m", "mapping": {1: "a", 2: "b"}})
        assert orjson.loads(rendered)["mapping"] == {"1": "a", "2": "b"}

    def test_integers_beyond_64_bits_render_as_strings(self) -> None:
        rendered = JSONFormatter().format({"message": "big", "n": 2**70, "small": 7})
        entry = orjson.loads(rendered)
        assert entry["n"] == str(2**70)
        assert entry["small"] == 7
        assert entry["message"] == "big"
