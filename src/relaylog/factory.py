"""
Sink and Logger factories.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .formatters import ENCODINGS, EncoderConfig, LogEncoding, PLAIN_ENCODER
from .exceptions import ConfigurationError
from .logger import Logger
from .sinks import BaseSink, DiscardSink, FileSink

logger = logging.getLogger(__name__)


def create_sink(
    encoding: LogEncoding,
    path: str | Path,
    min_level: int | str = logging.DEBUG,
    encoder: EncoderConfig = PLAIN_ENCODER,
    **console_options: Any,
) -> BaseSink:
    """
    Build a file sink, creating the destination directory first.

    Args:
        encoding: "console" (plain text) or "json"
        path: Destination file
        min_level: Lowest stdlib level that is written
        encoder: Key layout of rendered entries
        console_options: level_width / caller_width / separator for console output

    Raises:
        ConfigurationError: unknown encoding or level, or the directory or
            file cannot be created.
    """
    if encoding not in ENCODINGS:
        raise ConfigurationError(f"unsupported encoding '{encoding}'", details={"encoding": encoding})
    sink = FileSink(path, encoding=encoding, min_level=min_level, encoder=encoder, **console_options)
    logger.debug("created %s sink at %s (level %s)", encoding, path, logging.getLevelName(sink.min_level))
    return sink


def _new_file_logger(encoding: LogEncoding, directory: str, name: str) -> Logger:
    sink = create_sink(encoding, f"{directory}/{name}", logging.DEBUG, PLAIN_ENCODER)
    return Logger(sink, directory=directory, file_name=name)


def new_text_logger(directory: str, name: str) -> Logger:
    """Plain-text Logger writing to ``{directory}/{name}``."""
    return _new_file_logger("console", directory, name)


def new_json_logger(directory: str, name: str) -> Logger:
    """JSON Logger writing to ``{directory}/{name}``."""
    return _new_file_logger("json", directory, name)


def new_test_logger() -> Logger:
    """Logger whose entries are discarded."""
    return Logger(DiscardSink())
