"""
Multi-stream router: main, detailed and compilation logs.

Streams live under a directory named after the current day::

    {directory}/{YYYY_MM_DD}/{name}.log              main, console, INFO
    {directory}/{YYYY_MM_DD}/{name}_DETAILED.log     detailed, console, DEBUG
    {directory}/{YYYY_MM_DD}/{name}_COMPILATION.log  compilation, JSON, DEBUG

Configuration order: compilation (standalone or as part of main), main, then
detailed. Human-oriented streams receive messages with one leading space;
the compilation stream receives them verbatim.
"""

from __future__ import annotations

import inspect
import logging
import threading
from datetime import date
from enum import Enum
from typing import Any, Optional

from .exceptions import ConfigurationError, StreamNotConfiguredError
from .factory import create_sink
from .fields import Field
from .formatters import ROUTER_ENCODER
from .logger import Logger
from .sinks import BaseSink, DiscardSink

logger = logging.getLogger(__name__)

DIRECTORY_DATE_FORMAT = "%Y_%m_%d"


class RouterState(str, Enum):
    UNCONFIGURED = "unconfigured"
    COMPILATION_READY = "compilation_ready"
    MAIN_READY = "main_ready"
    DETAILED_READY = "detailed_ready"


def todays_log_directory(directory: str, today: Optional[date] = None) -> str:
    """Return ``{directory}/{YYYY_MM_DD}`` for today (or ``today``)."""
    today = today or date.today()
    return f"{directory}/{today.strftime(DIRECTORY_DATE_FORMAT)}"


def caller_location(stacklevel: int = 1) -> tuple[str, int] | None:
    """
    Resolve the file (last two path segments) and line of a caller.

    ``stacklevel=1`` is the function that called the function calling this
    one. Returns None when frames are unavailable.
    """
    frame = inspect.currentframe()
    try:
        for _ in range(stacklevel + 1):
            if frame is None:
                return None
            frame = frame.f_back
        if frame is None:
            return None
        segments = frame.f_code.co_filename.replace("\\", "/").split("/")
        return "/".join(segments[-2:]), frame.f_lineno
    finally:
        del frame


class Router:
    """Fans log calls out to independently configured streams.

    Args:
        main_level: Minimum level of the main stream
        detailed_level: Minimum level of the detailed and compilation streams
        console_options: level_width / caller_width / separator for console streams
    """

    def __init__(
        self,
        *,
        main_level: int | str = logging.INFO,
        detailed_level: int | str = logging.DEBUG,
        **console_options: Any,
    ) -> None:
        self._main_level = main_level
        self._detailed_level = detailed_level
        self._console_options = console_options
        self._main: Logger | None = None
        self._detailed: Logger | None = None
        self._compilation: Logger | None = None
        self._errors = 0
        self._warnings = 0
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def main(self) -> Logger | None:
        return self._main

    @property
    def detailed(self) -> Logger | None:
        return self._detailed

    @property
    def compilation(self) -> Logger | None:
        return self._compilation

    @property
    def state(self) -> RouterState:
        if self._detailed is not None:
            return RouterState.DETAILED_READY
        if self._main is not None:
            return RouterState.MAIN_READY
        if self._compilation is not None:
            return RouterState.COMPILATION_READY
        return RouterState.UNCONFIGURED

    def error_amount(self) -> int:
        return self._errors

    def warning_amount(self) -> int:
        return self._warnings

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _build_stream(self, directory: str, file_name: str, encoding: str, level: int | str) -> Logger:
        dated = todays_log_directory(directory)
        options = self._console_options if encoding == "console" else {}
        sink = create_sink(encoding, f"{dated}/{file_name}", level, ROUTER_ENCODER, **options)  # type: ignore[arg-type]
        return Logger(sink, directory=dated, file_name=file_name)

    def _publish(self, **streams: Logger) -> None:
        replaced = []
        with self._lock:
            for name, stream in streams.items():
                attr = f"_{name}"
                old = getattr(self, attr)
                if old is not None and old is not stream:
                    replaced.append(old)
                setattr(self, attr, stream)
        for old in replaced:
            old.close()

    def configure_compilation(self, directory: str, name: str) -> None:
        """Configure the machine-parseable JSON stream."""
        compilation = self._build_stream(directory, f"{name}_COMPILATION.log", "json", self._detailed_level)
        self._publish(compilation=compilation)
        logger.debug("compilation stream configured at %s", compilation.path())

    def configure_main(self, directory: str, name: str) -> None:
        """Configure the compilation stream and then the main stream.

        Nothing is published unless both streams were built.
        """
        compilation = self._build_stream(directory, f"{name}_COMPILATION.log", "json", self._detailed_level)
        try:
            main = self._build_stream(directory, f"{name}.log", "console", self._main_level)
        except ConfigurationError:
            compilation.close()
            raise
        self._publish(compilation=compilation, main=main)
        logger.debug("main stream configured at %s", main.path())

    def configure_detailed(self, directory: str, name: str) -> None:
        """Configure the detailed (debug) stream; requires the main stream."""
        if self._main is None:
            raise ConfigurationError("must configure main logger before detailed logger")
        detailed = self._build_stream(directory, f"{name}_DETAILED.log", "console", self._detailed_level)
        self._publish(detailed=detailed)
        logger.debug("detailed stream configured at %s", detailed.path())

    def configure_main_for_test(
        self,
        main_sink: BaseSink | None = None,
        compilation_sink: BaseSink | None = None,
    ) -> None:
        """Configure main and compilation streams that write nowhere (or to the given sinks)."""
        self._publish(
            compilation=Logger(compilation_sink or DiscardSink(encoding="json", encoder=ROUTER_ENCODER)),
            main=Logger(main_sink or DiscardSink(encoder=ROUTER_ENCODER, min_level=self._main_level)),
        )

    def configure_detailed_for_test(self, sink: BaseSink | None = None) -> None:
        """Configure a detailed stream that writes nowhere (or to ``sink``)."""
        self._publish(detailed=Logger(sink or DiscardSink(encoder=ROUTER_ENCODER)))

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _streams(self) -> tuple[Logger, Logger, Logger | None]:
        with self._lock:
            main, compilation, detailed = self._main, self._compilation, self._detailed
        if main is None:
            raise StreamNotConfiguredError("main")
        if compilation is None:
            raise StreamNotConfiguredError("compilation")
        return main, compilation, detailed

    def info(self, message: str, *fields: Field) -> None:
        """Write to main and compilation, and to detailed when configured."""
        main, compilation, detailed = self._streams()
        main.info(f" {message}", *fields)
        compilation.info(message, *fields)
        if detailed is not None:
            detailed.info(f" {message}", *fields)

    def detail_info(self, message: str, *fields: Field) -> None:
        """Write to the detailed and compilation streams only."""
        with self._lock:
            detailed, compilation = self._detailed, self._compilation
        if detailed is None:
            raise StreamNotConfiguredError("detailed")
        if compilation is None:
            raise StreamNotConfiguredError("compilation")
        detailed.info(f" {message}", *fields)
        compilation.info(message, *fields)

    def error(self, message: str, *fields: Field, stacklevel: int = 1) -> None:
        """
        Count and write an error annotated with the caller's location.

        Args:
            message: Error description
            fields: Extra structured fields
            stacklevel: Frame to report; 1 is the direct caller, raise it
                from helper functions that wrap this one.
        """
        main, compilation, detailed = self._streams()
        with self._lock:
            self._errors += 1
        location = caller_location(stacklevel)
        if location is not None:
            file, line = location
            plain = f"occurred at {file}, line {line}: {message}"
            prefixed = f" {plain}"
        else:
            plain = prefixed = f" {message}"
        main.error(prefixed, *fields)
        compilation.error(plain, *fields)
        if detailed is not None:
            detailed.error(prefixed, *fields)

    def warning(self, message: str, *fields: Field) -> None:
        """Count and write a warning."""
        main, compilation, detailed = self._streams()
        with self._lock:
            self._warnings += 1
        main.warn(f" {message}", *fields)
        compilation.warn(message, *fields)
        if detailed is not None:
            detailed.warn(f" {message}", *fields)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def flush(self) -> None:
        """Flush detailed, compilation, then main; the first FlushError propagates."""
        with self._lock:
            streams = [self._detailed, self._compilation, self._main]
        for stream in streams:
            if stream is not None:
                stream.flush()

    def close(self) -> None:
        with self._lock:
            streams = [self._detailed, self._compilation, self._main]
        for stream in streams:
            if stream is not None:
                stream.close()
