"""
Bridge from the standard library ``logging`` module into a relaylog Logger.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .fields import field
from .logger import LoggerLike


class LoggerHandler(logging.Handler):
    """
    Forward stdlib log records to a relaylog Logger.

    Records at ERROR and above become ``error`` calls, WARNING becomes
    ``warn`` and everything else ``info``, so third-party warnings and errors
    show up in the target's counters.
    """

    def __init__(self, target: LoggerLike, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            name = field("logger", self._simplify_logger_name(record.name))
            if record.levelno >= logging.ERROR:
                self.target.error(msg, name)
            elif record.levelno >= logging.WARNING:
                self.target.warn(msg, name)
            else:
                self.target.info(msg, name)
        except Exception:
            self.handleError(record)

    @staticmethod
    def _simplify_logger_name(name: str) -> str:
        """
        Keep short names, trim long dotted names to their last two parts.

        "uvicorn.access" -> "uvicorn.access"
        "google.adk.cli.utils.logs" -> "utils.logs"
        """
        if not name:
            return "stdlib"
        parts = name.split(".")
        if len(parts) <= 2:
            return name
        return ".".join(parts[-2:])


def bridge_stdlib(target: LoggerLike, names: Iterable[str] | None = None, level: int = logging.INFO) -> LoggerHandler:
    """
    Install a LoggerHandler on the root logger or on the named loggers.

    Named loggers stop propagating so their records are not written twice.
    """
    handler = LoggerHandler(target)
    if names is None:
        root = logging.getLogger()
        root.addHandler(handler)
        root.setLevel(level)
        return handler

    for name in names:
        lg = logging.getLogger(name)
        lg.addHandler(handler)
        lg.setLevel(level)
        lg.propagate = False
    return handler
