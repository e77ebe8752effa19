from __future__ import annotations

import json
import logging
import threading
from collections import Counter, defaultdict, deque
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Deque, Dict, Mapping

DEFAULT_LOGGER_NAME = "funcchain"
MAX_METRIC_SAMPLES = 100


class JsonFormatter(logging.Formatter):
    """Simple JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "event": getattr(record, "event", record.getMessage()),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
        }
        extra_fields = getattr(record, "fields", None)
        if isinstance(extra_fields, Mapping):
            payload.update(extra_fields)
        return json.dumps(payload, sort_keys=True, default=str)


_logger_lock = threading.Lock()
_logger: logging.Logger | None = None


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    global _logger
    with _logger_lock:
        if _logger is None:
            handler = logging.StreamHandler()
            handler.setFormatter(JsonFormatter())
            logging.basicConfig(level=level, handlers=[handler], force=True)
            _logger = logging.getLogger(DEFAULT_LOGGER_NAME)
            _logger.setLevel(level)
        return _logger


def get_logger() -> logging.Logger:
    return _logger or logging.getLogger(DEFAULT_LOGGER_NAME)


@dataclass
class StopStats:
    link_type: str
    status: int
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"link_type": self.link_type, "status": self.status, "count": self.count}


class Metrics:
    def __init__(self, sample_size: int = MAX_METRIC_SAMPLES) -> None:
        self._latency: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=sample_size))
        self._stops: Counter[tuple[str, int]] = Counter()
        self._lock = threading.Lock()

    def record_latency(self, route: str, duration_ms: float) -> None:
        with self._lock:
            self._latency[route].append(duration_ms)

    def route_p95(self, route: str) -> float:
        with self._lock:
            samples = list(self._latency.get(route, ()))
        if not samples:
            return 0.0
        if len(samples) == 1:
            return float(samples[0])
        samples.sort()
        index = max(int(0.95 * (len(samples) - 1)), 0)
        return float(samples[index])

    def record_chain_stop(self, link_type: str, status: int) -> Dict[str, Any]:
        with self._lock:
            self._stops[(link_type, status)] += 1
            count = self._stops[(link_type, status)]
        return StopStats(link_type=link_type, status=status, count=count).to_dict()

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            latency = {route: list(values) for route, values in self._latency.items()}
            stops = [
                StopStats(link_type=link_type, status=status, count=count).to_dict()
                for (link_type, status), count in sorted(self._stops.items())
            ]
        return {"latency_samples_ms": latency, "chain_stops": stops}

    def reset(self) -> None:
        with self._lock:
            self._latency.clear()
            self._stops.clear()


_metrics = Metrics()


def get_metrics() -> Metrics:
    return _metrics


def log_event(event: str, **fields: Any) -> None:
    logger = _logger or configure_logging()
    logger.info(event, extra={"event": event, "fields": fields})


class Timer:
    def __init__(self) -> None:
        self._start = perf_counter()

    def stop(self) -> float:
        end = perf_counter()
        duration = (end - self._start) * 1000
        self._start = end
        return duration


__all__ = [
    "JsonFormatter",
    "Metrics",
    "Timer",
    "configure_logging",
    "get_logger",
    "get_metrics",
    "log_event",
]
