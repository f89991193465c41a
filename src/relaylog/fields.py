"""
Structured fields attached to individual log calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class Field:
    """A single key/value annotation on a log entry."""

    key: str
    value: Any


def field(key: str, value: Any) -> Field:
    """Wrap an arbitrary value for structured output."""
    return Field(key, value)


def error_field(err: BaseException) -> Field:
    """Return a field keyed ``cause`` holding the error's message."""
    return field("cause", str(err))


def fields_to_dict(fields: Iterable[Field]) -> Dict[str, Any]:
    """Collapse fields into an event mapping; later keys win."""
    return {f.key: f.value for f in fields}


def format_date(value: Optional[date]) -> str:
    if value is None:
        return "nil"
    return value.strftime(DATE_FORMAT)


class ObjectFieldBuilder:
    """Builds a nested object field from explicitly typed members.

    Usage:
        builder = ObjectFieldBuilder()
        builder.string("name", order.name).integer("qty", order.qty)
        logger.info("order placed", builder.build("order"))
    """

    def __init__(self) -> None:
        self._members: Dict[str, Any] = {}

    def string(self, name: str, value: str) -> ObjectFieldBuilder:
        self._members[name] = str(value)
        return self

    def integer(self, name: str, value: int) -> ObjectFieldBuilder:
        self._members[name] = int(value)
        return self

    def floating(self, name: str, value: float) -> ObjectFieldBuilder:
        self._members[name] = float(value)
        return self

    def boolean(self, name: str, value: bool) -> ObjectFieldBuilder:
        self._members[name] = bool(value)
        return self

    def date(self, name: str, value: Optional[date]) -> ObjectFieldBuilder:
        self._members[name] = format_date(value)
        return self

    def build(self, key: str) -> Field:
        return Field(key, dict(self._members))
