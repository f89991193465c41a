"""
Instance logger with attached children.

A Logger writes each entry to its own sink and then repeats the call on every
attached child, depth-first and in attachment order. Counters are per Logger:
a parent counts the calls made on it, a child counts the calls it receives.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from .fields import Field, fields_to_dict
from .sinks import BaseSink


@runtime_checkable
class LoggerLike(Protocol):
    """Everything a parent needs from an attached child."""

    def info(self, message: str, *fields: Field) -> None: ...
    def warn(self, message: str, *fields: Field) -> None: ...
    def error(self, message: str, *fields: Field) -> None: ...
    def error_count(self) -> int: ...
    def warning_count(self) -> int: ...
    def attach(self, child: LoggerLike) -> None: ...
    def flush(self) -> None: ...
    def path(self) -> str: ...


class Logger:
    """Structured logger bound to one sink.

    Attaching a Logger to itself or to one of its ancestors recurses without
    bound on the next log call; callers must keep the attachment graph acyclic.
    """

    def __init__(self, sink: BaseSink, *, directory: str = "", file_name: str = "") -> None:
        self._sink = sink
        self._directory = directory
        self._file_name = file_name
        self._attached: list[LoggerLike] = []
        self._errors = 0
        self._warnings = 0
        self._lock = threading.Lock()

    @property
    def sink(self) -> BaseSink:
        return self._sink

    def _children(self) -> list[LoggerLike]:
        with self._lock:
            return list(self._attached)

    def info(self, message: str, *fields: Field) -> None:
        self._sink.write("info", message, fields_to_dict(fields))
        for child in self._children():
            child.info(message, *fields)

    def warn(self, message: str, *fields: Field) -> None:
        self._sink.write("warning", message, fields_to_dict(fields))
        with self._lock:
            self._warnings += 1
        for child in self._children():
            child.warn(message, *fields)

    def error(self, message: str, *fields: Field) -> None:
        self._sink.write("error", message, fields_to_dict(fields))
        with self._lock:
            self._errors += 1
        for child in self._children():
            child.error(message, *fields)

    def error_count(self) -> int:
        return self._errors

    def warning_count(self) -> int:
        return self._warnings

    def attach(self, child: LoggerLike) -> None:
        with self._lock:
            self._attached.append(child)

    def flush(self) -> None:
        """Sync this logger, then each child; the first FlushError propagates."""
        self._sink.sync()
        for child in self._children():
            child.flush()

    def path(self) -> str:
        return f"{self._directory}/{self._file_name}"

    def close(self) -> None:
        self._sink.close()

    def __repr__(self) -> str:
        return f"Logger(path={self.path()!r}, attached={len(self._attached)})"
