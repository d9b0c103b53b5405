"""
Shared fixtures for the travel companion tests.

Backoff sleeps are recorded instead of awaited and the cache clock is
advanced by hand, so retry and expiry behaviour is deterministic.
"""

from __future__ import annotations

import pytest

from companion.llm_adapter import CacheStore, MockProvider, RetryExecutor
from companion.observability.metrics import MetricsRecorder
from services.travel_service.config import TravelConfig
from services.travel_service.orchestrator import build_orchestrator

PRIMARY_MODEL = "gpt-4"
FALLBACK_MODEL = "gpt-3.5-turbo"


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def travel_config() -> TravelConfig:
    return TravelConfig(
        llm_provider="mock",
        model=PRIMARY_MODEL,
        fallback_model=FALLBACK_MODEL,
        insights_tokens=1000,
        itinerary_tokens=1500,
        translation_tokens=500,
        request_timeout_s=30.0,
        cache_ttl_seconds=3600.0,
        max_conversation_messages=10,
        log_level="DEBUG",
    )


@pytest.fixture
def provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> CacheStore:
    return CacheStore(clock=clock)


@pytest.fixture
def metrics() -> MetricsRecorder:
    return MetricsRecorder()


@pytest.fixture
def executor(provider, cache, metrics, recording_sleep) -> RetryExecutor:
    return RetryExecutor(
        provider,
        cache,
        metrics,
        fallback_model=FALLBACK_MODEL,
        sleep=recording_sleep,
    )


@pytest.fixture
def orchestrator(travel_config, provider, recording_sleep):
    return build_orchestrator(travel_config, provider, sleep=recording_sleep)
