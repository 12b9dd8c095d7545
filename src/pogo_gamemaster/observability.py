"""Logging and metrics tooling for pogo_gamemaster."""
from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from . import config
from .errors import sanitize_context

__all__ = [
    "configure_logging",
    "get_logger",
    "metrics",
    "metrics_snapshot",
    "render_metrics",
]


_STANDARD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys())
_LOGGER_NAME = "pogo_gamemaster"
_CONFIGURED = False
_LOCK = threading.Lock()


class StructuredLogFormatter(logging.Formatter):
    """Format log records as structured JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        event = getattr(record, "event", None) or "log"
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": event,
            "message": message,
        }

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and key not in {"message", "asctime", "event"}
        }
        if extras:
            payload["context"] = sanitize_context(extras)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True, default=str)


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Configure structured logging once and return the package logger.

    Without an explicit ``level`` the ``POGO_GAMEMASTER_LOG_LEVEL`` environment
    variable is honoured the first time the logger is configured.
    """

    global _CONFIGURED
    with _LOCK:
        logger = logging.getLogger(_LOGGER_NAME)
        if not _CONFIGURED:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredLogFormatter())
            logger.addHandler(handler)
            logger.propagate = False
            _CONFIGURED = True
        if level is not None:
            logger.setLevel(level if isinstance(level, int) else level.upper())
        elif logger.level == logging.NOTSET:
            logger.setLevel(config.log_level())
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger with structured configuration."""

    configure_logging()
    if name and name != _LOGGER_NAME:
        if name.startswith(f"{_LOGGER_NAME}."):
            return logging.getLogger(name)
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


class MetricsRegistry:
    """Thread-safe, in-process metrics collector with Prometheus rendering."""

    def __init__(self) -> None:
        self._metadata: Dict[str, Tuple[str, str]] = {}
        self._counters: Dict[str, float] = {}
        self._gauges: Dict[str, float] = {}
        self._summaries: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def register_counter(self, name: str, description: str) -> None:
        self._metadata[name] = ("counter", description)

    def register_gauge(self, name: str, description: str) -> None:
        self._metadata[name] = ("gauge", description)
        self._gauges.setdefault(name, 0.0)

    def register_summary(self, name: str, description: str) -> None:
        self._metadata[name] = ("summary", description)
        self._summaries.setdefault(name, [])

    def increment(self, name: str, amount: float = 1.0) -> None:
        with self._lock:
            self._counters[name] = self._counters.get(name, 0.0) + amount

    def set_gauge(self, name: str, value: float) -> None:
        with self._lock:
            self._gauges[name] = value

    def observe(self, name: str, value: float) -> None:
        with self._lock:
            self._summaries.setdefault(name, []).append(value)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
                "summaries": {key: list(values) for key, values in self._summaries.items()},
            }

    def render_prometheus(self) -> str:
        lines: List[str] = []
        snapshot = self.snapshot()
        for name, (metric_type, description) in self._metadata.items():
            lines.append(f"# HELP {name} {description}")
            lines.append(f"# TYPE {name} {metric_type}")
            if metric_type == "counter":
                lines.append(f"{name} {snapshot['counters'].get(name, 0.0)}")
            elif metric_type == "gauge":
                lines.append(f"{name} {snapshot['gauges'].get(name, 0.0)}")
            elif metric_type == "summary":
                values = snapshot["summaries"].get(name, [])
                count = float(len(values))
                total = float(sum(values))
                lines.append(f"{name}_count {count}")
                lines.append(f"{name}_sum {total}")
        return "\n".join(lines) + "\n"


metrics = MetricsRegistry()
metrics.register_counter(
    "pogo_gamemaster_catalog_loads_total", "Catalogs built successfully.")
metrics.register_counter(
    "pogo_gamemaster_catalog_failures_total", "Catalog payloads rejected as malformed.")
metrics.register_summary(
    "pogo_gamemaster_catalog_build_seconds", "Catalog index construction time in seconds.")
metrics.register_gauge(
    "pogo_gamemaster_catalog_species", "Species held by the most recently built catalog.")
metrics.register_counter(
    "pogo_gamemaster_calculations_total", "Creature CP calculations performed.")


def metrics_snapshot() -> Dict[str, Any]:
    """Return a simple dictionary snapshot of the in-process metrics."""

    return metrics.snapshot()


def render_metrics() -> str:
    """Render metrics in Prometheus exposition format."""

    return metrics.render_prometheus()
