from __future__ import annotations

from dataclasses import asdict, dataclass
from threading import Lock
from typing import Any


@dataclass
class _LatencyAgg:
    count: int = 0
    sum_ms: float = 0.0
    max_ms: float = 0.0

    def observe(self, elapsed_ms: float) -> None:
        self.count += 1
        self.sum_ms += float(elapsed_ms)
        if elapsed_ms > self.max_ms:
            self.max_ms = float(elapsed_ms)


class InMemoryMetrics:
    """Thread-safe, process-local metrics (resets on restart)."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.http_requests_total: int = 0
        self.extractions_total: int = 0
        self.extractions_empty_total: int = 0
        self.strategy_hits: dict[str, int] = {}
        self.http_request_ms = _LatencyAgg()
        self.extraction_ms = _LatencyAgg()

    def observe_http_request(self, elapsed_ms: float) -> None:
        with self._lock:
            self.http_requests_total += 1
            self.http_request_ms.observe(elapsed_ms)

    def observe_extraction(self, elapsed_ms: float, strategy: str, answer_count: int) -> None:
        with self._lock:
            self.extractions_total += 1
            self.extraction_ms.observe(elapsed_ms)
            if answer_count == 0:
                self.extractions_empty_total += 1
            self.strategy_hits[strategy] = self.strategy_hits.get(strategy, 0) + 1

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counters": {
                    "http_requests_total": self.http_requests_total,
                    "extractions_total": self.extractions_total,
                    "extractions_empty_total": self.extractions_empty_total,
                },
                "strategy_hits": dict(self.strategy_hits),
                "latency_ms": {
                    "http_request_ms": asdict(self.http_request_ms),
                    "extraction_ms": asdict(self.extraction_ms),
                },
            }

    def reset(self) -> None:
        with self._lock:
            self.http_requests_total = 0
            self.extractions_total = 0
            self.extractions_empty_total = 0
            self.strategy_hits = {}
            self.http_request_ms = _LatencyAgg()
            self.extraction_ms = _LatencyAgg()


_METRICS: InMemoryMetrics | None = None


def get_metrics() -> InMemoryMetrics:
    global _METRICS
    if _METRICS is None:
        _METRICS = InMemoryMetrics()
    return _METRICS


def reset_metrics() -> None:
    """Reset metrics counters/aggregates (used by tests)."""

    get_metrics().reset()
