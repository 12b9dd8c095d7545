"""Centralised error taxonomy for pogo_gamemaster."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping

__all__ = [
    "PogoGamemasterError",
    "DependencyError",
    "InputValidationError",
    "OperationalError",
    "ParseError",
    "InvalidLevelError",
    "StreamError",
    "sanitize_context",
]


_MAX_PREVIEW = 80


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return sanitize_context(value)
    if isinstance(value, list):
        return [_sanitize_value(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        # Raw payloads can be megabytes of gamemaster; keep only a short preview.
        return bytes(value[:_MAX_PREVIEW]).decode("utf-8", errors="replace")
    return value


def sanitize_context(context: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a sanitised copy of contextual logging or error data."""

    return {key: _sanitize_value(value) for key, value in context.items()}


@dataclass
class PogoGamemasterError(Exception):
    """Base class for structured, actionable errors raised by the package."""

    message: str
    remediation: str | None = None
    context: Dict[str, Any] | None = None

    category: ClassVar[str] = "internal_error"

    def __post_init__(self) -> None:  # pragma: no cover - trivial
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "category": self.category,
            "message": self.message,
        }
        if self.remediation:
            payload["remediation"] = self.remediation
        if self.context:
            payload["context"] = sanitize_context(self.context)
        return payload


class DependencyError(PogoGamemasterError):
    category = "dependency_error"


class InputValidationError(PogoGamemasterError):
    category = "input_error"


class ParseError(InputValidationError):
    """Bytes could not be decoded into the expected document schema."""

    category = "parse_error"


class InvalidLevelError(InputValidationError):
    """Level is not a half-step between the first and last CPM table entries."""

    category = "invalid_level"


class OperationalError(PogoGamemasterError):
    category = "operational_error"


class StreamError(OperationalError):
    """A caller-supplied byte source or sink failed."""

    category = "stream_error"
