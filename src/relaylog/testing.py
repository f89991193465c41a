"""
Test doubles for code that logs through relaylog.

``LogMock`` stands in for any Logger; ``MemorySink`` keeps rendered entries so
tests can assert on real output without touching the filesystem.
"""

from __future__ import annotations

import io
from collections import Counter, defaultdict
from typing import Any, Callable, Optional

import orjson

from .fields import Field
from .logger import LoggerLike
from .sinks import StreamSink


class LogMock:
    """Logger double with injectable behavior and per-method call tracking.

    Each keyword names a method and supplies the callable run when it is
    called. Unset methods do nothing and return a neutral value.

    Example:
        child = LogMock(flush=lambda: None)
        parent.attach(child)
        parent.flush()
        assert child.calls["flush"] == 1
    """

    _METHODS = frozenset({"info", "warn", "error", "error_count", "warning_count", "attach", "flush", "path"})
    _DEFAULTS: dict[str, Any] = {"error_count": 0, "warning_count": 0, "path": ""}

    def __init__(self, **behaviors: Optional[Callable[..., Any]]) -> None:
        unknown = set(behaviors) - self._METHODS
        if unknown:
            raise TypeError(f"unknown LogMock methods: {sorted(unknown)}")
        self.behaviors = behaviors
        self.calls: Counter[str] = Counter()
        self.call_args: defaultdict[str, list[tuple[Any, ...]]] = defaultdict(list)

    def _invoke(self, name: str, *args: Any) -> Any:
        self.calls[name] += 1
        self.call_args[name].append(args)
        behavior = self.behaviors.get(name)
        if behavior is None:
            return self._DEFAULTS.get(name)
        return behavior(*args)

    def info(self, message: str, *fields: Field) -> None:
        self._invoke("info", message, *fields)

    def warn(self, message: str, *fields: Field) -> None:
        self._invoke("warn", message, *fields)

    def error(self, message: str, *fields: Field) -> None:
        self._invoke("error", message, *fields)

    def error_count(self) -> int:
        return self._invoke("error_count")

    def warning_count(self) -> int:
        return self._invoke("warning_count")

    def attach(self, child: LoggerLike) -> None:
        self._invoke("attach", child)

    def flush(self) -> None:
        self._invoke("flush")

    def path(self) -> str:
        return self._invoke("path")


class MemorySink(StreamSink):
    """Sink that keeps rendered entries in memory."""

    def __init__(self, **options: Any):
        options.setdefault("path", "<memory>")
        self._buffer = io.StringIO()
        super().__init__(self._buffer, **options)

    @property
    def lines(self) -> list[str]:
        return self._buffer.getvalue().splitlines()

    @property
    def entries(self) -> list[dict[str, Any]]:
        """Decoded entries; only meaningful for JSON encoding."""
        return [orjson.loads(line) for line in self.lines]

    @property
    def messages(self) -> list[str]:
        key = self.encoder.message_key
        if self.encoding == "json":
            return [entry.get(key, "") for entry in self.entries]
        return [line.split(self._separator, 3)[-1] for line in self.lines]

    @property
    def _separator(self) -> str:
        return self.console_options.get("separator", " | ")
