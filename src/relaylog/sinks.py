"""
Log sink abstractions and concrete implementations.

Every sink owns a private structlog pipeline (``structlog.wrap_logger``) so
that sinks with different encodings, levels and key layouts can coexist in
one process without touching structlog's global configuration.
"""

from __future__ import annotations

import inspect
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, TextIO

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from .exceptions import ConfigurationError, FlushError
from .formatters import (
    ENCODINGS,
    ConsoleFormatter,
    EncoderConfig,
    JSONFormatter,
    LogEncoding,
    PLAIN_ENCODER,
)

DIRECTORY_MODE = 0o755

# Frames from these packages (and their submodules) are skipped when resolving the caller.
_CALLER_IGNORES = ("relaylog", "structlog", "logging")

# Context key carrying the call's fields through structlog's bind().
FIELDS_KEY = "_relaylog_fields"


# =============================================================================
# Structlog Processors
# =============================================================================


def merge_fields(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Unpack the call's fields; the message is never replaced by a field."""
    fields = event_dict.pop(FIELDS_KEY, None) or {}
    for key, value in fields.items():
        event_dict.setdefault(key, value)
    return event_dict


def rename_event_key(encoder: EncoderConfig) -> Processor:
    """Rename structlog's 'event' to the encoder's message key."""

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if "event" in event_dict:
            event_dict[encoder.message_key] = event_dict.pop("event")
        return event_dict

    return processor


def capitalize_level(encoder: EncoderConfig) -> Processor:
    """Upper-case the level and move it under the encoder's level key."""

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        level = event_dict.pop("level", method_name)
        event_dict[encoder.level_key] = str(level).upper()
        return event_dict

    return processor


def is_internal_module(name: str) -> bool:
    return any(name == root or name.startswith(f"{root}.") for root in _CALLER_IGNORES)


def add_caller(encoder: EncoderConfig) -> Processor:
    """Add ``dir/file.py:line`` of the first frame outside the logging machinery."""

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        frame = inspect.currentframe()
        try:
            while frame is not None and is_internal_module(frame.f_globals.get("__name__", "")):
                frame = frame.f_back
            if frame is not None:
                segments = frame.f_code.co_filename.replace("\\", "/").split("/")
                event_dict[encoder.caller_key] = f"{'/'.join(segments[-2:])}:{frame.f_lineno}"
        finally:
            del frame
        return event_dict

    return processor


def build_processors(encoding: LogEncoding, encoder: EncoderConfig, **console_options: Any) -> list[Processor]:
    formatter: ConsoleFormatter | JSONFormatter
    if encoding == "json":
        formatter = JSONFormatter(encoder)
    else:
        formatter = ConsoleFormatter(encoder, **console_options)

    def render(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        return formatter.format(event_dict)

    return [
        merge_fields,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt=encoder.time_format, utc=False, key=encoder.time_key),
        add_caller(encoder),
        capitalize_level(encoder),
        rename_event_key(encoder),
        render,
    ]


_LEVELS = frozenset({logging.NOTSET, logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL})


def resolve_level(level: int | str) -> int:
    """Turn a standard stdlib level name or number into a number."""
    value = level if isinstance(level, int) else getattr(logging, str(level).upper(), None)
    if value not in _LEVELS:
        raise ConfigurationError(f"unknown log level '{level}'", details={"level": level})
    return value  # type: ignore[return-value]


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    path: str = ""

    @abstractmethod
    def write(self, method: str, message: str, fields: Mapping[str, Any]) -> None:
        """Write one entry. ``method`` is debug, info, warning or error."""
        ...

    @abstractmethod
    def sync(self) -> None:
        """Push buffered entries to the destination, raising FlushError."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StreamSink(BaseSink):
    """Sink rendering entries through structlog onto a text stream.

    Args:
        stream: Writable text stream
        encoding: "console" (aligned plain text) or "json"
        min_level: Entries below this stdlib level are dropped
        encoder: Names of the fixed keys
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        encoding: LogEncoding = "console",
        min_level: int | str = logging.DEBUG,
        encoder: EncoderConfig = PLAIN_ENCODER,
        path: str = "",
        **console_options: Any,
    ):
        if encoding not in ENCODINGS:
            raise ConfigurationError(f"unsupported encoding '{encoding}'", details={"encoding": encoding})
        self._stream = stream
        self.encoding = encoding
        self.encoder = encoder
        self.min_level = resolve_level(min_level)
        self.path = path
        self.console_options = console_options
        self._logger = structlog.wrap_logger(
            structlog.WriteLogger(stream),
            processors=build_processors(encoding, encoder, **console_options),
            wrapper_class=structlog.make_filtering_bound_logger(self.min_level),
            context_class=dict,
        ).bind()

    def write(self, method: str, message: str, fields: Mapping[str, Any]) -> None:
        try:
            getattr(self._logger.bind(**{FIELDS_KEY: dict(fields)}), method)(message)
        except (OSError, ValueError, TypeError):
            # Log calls are best-effort; sync() reports lasting failures.
            pass

    def sync(self) -> None:
        try:
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise FlushError(self.path, exc) from exc

    def close(self) -> None:
        pass


class FileSink(StreamSink):
    """Local append-only file sink; creates missing parent directories."""

    def __init__(self, path: str | Path, **options: Any):
        self._path = Path(path)
        ensure_directory(self._path.parent)
        try:
            file = open(self._path, "a", encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(
                f"cannot open log file '{self._path}': {exc}", details={"path": str(self._path)}
            ) from exc
        try:
            super().__init__(file, path=str(self._path), **options)
        except ConfigurationError:
            file.close()
            raise
        self._file = file

    def sync(self) -> None:
        try:
            self._file.flush()
            os.fsync(self._file.fileno())
        except (OSError, ValueError) as exc:
            raise FlushError(self.path, exc) from exc

    def close(self) -> None:
        self._file.close()


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


class DiscardSink(StreamSink):
    """Sink that runs the full pipeline and drops the output."""

    def __init__(self, **options: Any):
        options.setdefault("path", os.devnull)
        super().__init__(_NopFile(), **options)  # type: ignore[arg-type]


def ensure_directory(directory: str | Path) -> Path:
    """Create ``directory`` and any missing parents."""
    path = Path(directory)
    try:
        path.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"cannot create log directory '{path}': {exc}", details={"directory": str(path)}
        ) from exc
    return path
