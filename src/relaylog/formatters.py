"""
Entry encoders: key layout, aligned console rendering and JSON rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import orjson
from structlog.typing import EventDict

LogEncoding = Literal["console", "json"]

ENCODINGS: tuple[str, ...] = ("console", "json")


@dataclass(frozen=True)
class EncoderConfig:
    """Names of the fixed keys in a rendered entry."""

    message_key: str = "message"
    level_key: str = "level"
    time_key: str = "timestamp"
    caller_key: str = "caller"
    time_format: str = "%Y-%m-%d %H:%M:%S"


# Direct Logger API: human-readable timestamps.
PLAIN_ENCODER = EncoderConfig()

# Router streams: ISO-8601 timestamps and short keys.
ROUTER_ENCODER = EncoderConfig(message_key="msg", time_key="time", time_format="iso")


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(
        v,
        default=default,
        option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS,
    ).decode()


def _encodable(value: Any) -> Any:
    """Return ``value`` if orjson can encode it, otherwise its ``str``."""
    try:
        orjson_dumps(value)
    except orjson.JSONEncodeError:
        return str(value)
    return value


class JSONFormatter:
    """Renders one orjson object per entry, fixed keys first."""

    def __init__(self, encoder: EncoderConfig = PLAIN_ENCODER) -> None:
        self._encoder = encoder

    def format(self, event_dict: EventDict) -> str:
        enc = self._encoder
        ordered: dict[str, Any] = {}
        for key in (enc.level_key, enc.time_key, enc.caller_key, enc.message_key):
            if key in event_dict:
                ordered[key] = event_dict[key]
        for key, value in event_dict.items():
            if key not in ordered:
                ordered[key] = value
        try:
            return orjson_dumps(ordered)
        except orjson.JSONEncodeError:
            # Integers beyond 64 bits and similar values render as strings.
            return orjson_dumps({key: _encodable(value) for key, value in ordered.items()})


class ConsoleFormatter:
    """Handles human-readable rendering (fixed width, right-aligned columns).

    Format: ``timestamp | LEVEL | caller | message key=value ...``
    """

    def __init__(
        self,
        encoder: EncoderConfig = PLAIN_ENCODER,
        *,
        level_width: int = 8,
        caller_width: int = 24,
        separator: str = " | ",
    ) -> None:
        self._encoder = encoder
        self.level_width = level_width
        self.caller_width = caller_width
        self.separator = separator
        self._excluded = {
            encoder.message_key,
            encoder.level_key,
            encoder.time_key,
            encoder.caller_key,
        }

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    def format(self, event_dict: EventDict) -> str:
        """Format an event dict into an aligned line."""
        enc = self._encoder
        message_text = str(event_dict.get(enc.message_key, ""))

        extras = []
        for k, v in event_dict.items():
            if k not in self._excluded:
                extras.append(f"{k}={v}")
        if extras:
            message_text = f"{message_text} " + " ".join(extras)

        return self.separator.join(
            [
                str(event_dict.get(enc.time_key, "")),
                self._fit_right(str(event_dict.get(enc.level_key, "")), self.level_width),
                self._fit_right(str(event_dict.get(enc.caller_key, "")), self.caller_width),
                message_text,
            ]
        )
