"""
Sink factory and Logger factory tests.
"""

from __future__ import annotations

import logging
import re
import stat
from pathlib import Path

import orjson
import pytest

from relaylog import ConfigurationError, create_sink, field, new_json_logger, new_text_logger
from relaylog.formatters import ROUTER_ENCODER
from relaylog.sinks import FileSink, ensure_directory, is_internal_module, resolve_level
from relaylog.testing import MemorySink


class TestCreateSink:
    """create_sink: directories, encodings and levels"""

    def test_creates_missing_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "c" / "app.log"
        sink = create_sink("console", target)
        assert isinstance(sink, FileSink)
        assert target.exists()
        sink.close()

    def test_created_directory_is_not_group_writable(self, tmp_path: Path) -> None:
        directory = ensure_directory(tmp_path / "logs")
        mode = stat.S_IMODE(directory.stat().st_mode)
        assert mode & stat.S_IRUSR and mode & stat.S_IWUSR
        assert not mode & stat.S_IWGRP

    def test_unknown_encoding_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="unsupported encoding"):
            create_sink("xml", tmp_path / "app.log")  # type: ignore[arg-type]

    def test_unknown_level_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="unknown log level"):
            create_sink("json", tmp_path / "app.log", "LOUD")

    def test_directory_failure_is_configuration_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(ConfigurationError) as excinfo:
            create_sink("json", blocker / "app.log")
        assert excinfo.value.code == "CONFIGURATION_ERROR"

    def test_min_level_filters_entries(self, tmp_path: Path) -> None:
        path = tmp_path / "app.log"
        sink = create_sink("json", path, "WARNING")
        sink.write("info", "dropped", {})
        sink.write("warning", "kept", {})
        sink.sync()
        sink.close()
        lines = path.read_text().splitlines()
        assert [orjson.loads(line)["message"] for line in lines] == ["kept"]

    def test_resolve_level(self) -> None:
        assert resolve_level("info") == logging.INFO
        assert resolve_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ConfigurationError):
            resolve_level(25)


class TestTextLogger:
    def test_writes_plain_entries(self, tmp_path: Path) -> None:
        directory = str(tmp_path / "text")
        logger = new_text_logger(directory, "app.log")
        logger.info("hello", field("user", "ada"))
        logger.flush()
        logger.close()

        line = (tmp_path / "text" / "app.log").read_text().splitlines()[0]
        timestamp, level, caller, message = line.split(" | ", 3)
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", timestamp)
        assert level.strip() == "INFO"
        assert "test_factory.py:" in caller
        assert message == "hello user=ada"

    def test_path(self, tmp_path: Path) -> None:
        logger = new_text_logger(str(tmp_path), "app.log")
        assert logger.path() == f"{tmp_path}/app.log"
        logger.close()


class TestJSONLogger:
    def test_writes_json_entries(self, tmp_path: Path) -> None:
        logger = new_json_logger(str(tmp_path), "app.json")
        logger.warn("disk low", field("free_mb", 12))
        logger.flush()
        logger.close()

        entry = orjson.loads((tmp_path / "app.json").read_text().splitlines()[0])
        assert entry["message"] == "disk low"
        assert entry["level"] == "WARNING"
        assert entry["free_mb"] == 12
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", entry["timestamp"])
        assert entry["caller"].startswith("unit_tests/test_factory.py:")

    def test_appends_to_existing_file(self, tmp_path: Path) -> None:
        for text in ("first", "second"):
            logger = new_json_logger(str(tmp_path), "app.json")
            logger.info(text)
            logger.close()
        lines = (tmp_path / "app.json").read_text().splitlines()
        assert [orjson.loads(line)["message"] for line in lines] == ["first", "second"]


class TestMemorySink:
    def test_router_key_layout(self) -> None:
        sink = MemorySink(encoding="json", encoder=ROUTER_ENCODER)
        sink.write("error", "bad", {"cause": "io"})
        entry = sink.entries[0]
        assert list(entry)[:4] == ["level", "time", "caller", "msg"]
        assert entry["cause"] == "io"

    def test_field_colliding_with_message_key_is_overwritten(self) -> None:
        sink = MemorySink(encoding="json")
        sink.write("info", "real", {"event": "fake"})
        assert sink.messages == ["real"]

    def test_reserved_argument_names_are_plain_fields(self) -> None:
        sink = MemorySink(encoding="json")
        sink.write("info", "real", {"self": 1, "event": "fake", "method": "m"})
        entry = sink.entries[0]
        assert entry["self"] == 1
        assert entry["method"] == "m"
        assert entry["message"] == "real"


def _write_from_module(sink: MemorySink, module: str, filename: str) -> None:
    code = compile("sink.write('info', 'x', {})", filename, "exec")
    exec(code, {"__name__": module, "sink": sink})


class TestCallerResolution:
    """Caller lookup skips only the logging machinery's own modules"""

    @pytest.mark.parametrize(
        ("name", "internal"),
        [
            ("logging", True),
            ("logging.handlers", True),
            ("structlog._log_levels", True),
            ("relaylog", True),
            ("relaylog.router", True),
            ("logging_utils", False),
            ("relaylog_app", False),
            ("structlogger", False),
            ("app.logging", False),
        ],
    )
    def test_is_internal_module(self, name: str, internal: bool) -> None:
        assert is_internal_module(name) is internal

    @pytest.mark.parametrize(
        ("module", "filename"),
        [("logging_utils", "pkg/logging_utils.py"), ("relaylog_app", "app/relaylog_app.py")],
    )
    def test_user_modules_with_similar_names_are_callers(self, module: str, filename: str) -> None:
        sink = MemorySink(encoding="json")
        _write_from_module(sink, module, filename)
        assert sink.entries[0]["caller"] == f"{filename}:1"
