"""
Backend call accounting.

MetricsRecorder keeps the in-process counters reported by the service's
performance endpoint. The Prometheus series below are exported on /metrics.
"""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from pydantic import BaseModel


llm_calls = Counter(
    "llm_calls_total",
    "Backend generation attempts",
    ["model", "outcome"],
)

llm_call_latency = Histogram(
    "llm_call_latency_seconds",
    "Latency of successful backend generation attempts",
    ["model"],
    buckets=(0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0),
)

llm_cache_lookups = Counter(
    "llm_cache_lookups_total",
    "Response cache lookups",
    ["result"],
)

llm_fallback_escalations = Counter(
    "llm_fallback_escalations_total",
    "Requests escalated to the fallback model",
)


class PerformanceMetrics(BaseModel):
    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    average_response_time: float = 0.0


class MetricsSnapshot(PerformanceMetrics):
    success_rate: float = 0.0


class MetricsRecorder:
    """
    Running counters over backend attempts.

    ``average_response_time`` (ms) is an incremental mean over successful
    calls only; it is never recomputed from history.
    """

    def __init__(self) -> None:
        self._metrics = PerformanceMetrics()

    def record(self, success: bool, duration_ms: float = 0.0) -> None:
        m = self._metrics
        m.total_calls += 1
        if success:
            m.successful_calls += 1
            m.average_response_time += (
                duration_ms - m.average_response_time
            ) / m.successful_calls
        else:
            m.failed_calls += 1

    def snapshot(self) -> MetricsSnapshot:
        m = self._metrics
        rate = (m.successful_calls / m.total_calls) * 100 if m.total_calls else 0.0
        return MetricsSnapshot(**m.model_dump(), success_rate=rate)

    def reset(self) -> None:
        self._metrics = PerformanceMetrics()


def metrics_response() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
