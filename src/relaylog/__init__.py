"""
relaylog: structured logging facade.

Provides structured logging with parent/child forwarding and stream routing:
- Logger: one sink, per-logger error/warning counters, attached children
- Router: main (console), detailed (console, debug) and compilation (JSON) streams
- Field helpers for structured annotations

Library: structlog + orjson for structured rendering.
"""

from .context import get_router, init, shutdown, use_router
from .exceptions import ConfigurationError, FlushError, RelaylogError, StreamNotConfiguredError
from .factory import create_sink, new_json_logger, new_test_logger, new_text_logger
from .fields import Field, ObjectFieldBuilder, error_field, field
from .logger import Logger, LoggerLike
from .router import Router, RouterState

__all__ = [
    "ConfigurationError",
    "Field",
    "FlushError",
    "Logger",
    "LoggerLike",
    "ObjectFieldBuilder",
    "RelaylogError",
    "Router",
    "RouterState",
    "StreamNotConfiguredError",
    "create_sink",
    "error_field",
    "field",
    "get_router",
    "init",
    "new_json_logger",
    "new_test_logger",
    "new_text_logger",
    "shutdown",
    "use_router",
]

__version__ = "0.1.0"
