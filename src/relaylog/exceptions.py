"""
relaylog exception hierarchy.

Configuration problems surface when a sink or stream is built; flush problems
surface when a sink is synchronized to disk. Log calls themselves never raise
for I/O failures.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RelaylogError(Exception):
    """Root of every relaylog error."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(RelaylogError):
    """A sink could not be built or streams were configured out of order."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class StreamNotConfiguredError(ConfigurationError):
    """A router stream was used before it was configured."""

    def __init__(self, stream: str) -> None:
        super().__init__(f"{stream} logger has not been configured", details={"stream": stream})
        self.code = "STREAM_NOT_CONFIGURED"
        self.stream = stream


class FlushError(RelaylogError):
    """Synchronizing a sink to its destination failed."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        message = f"failed to flush log '{path}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, code="FLUSH_ERROR", details={"path": path})
        self.path = path
