"""
Resilient generation: cache lookup, backoff retries and model fallback.

One call to ``RetryExecutor.generate`` resolves one logical request. The loop
below walks a small state machine; the budgets are plain integers so every
path terminates:

  PENDING -> CACHE_HIT -> RETURNED
  PENDING -> IN_FLIGHT -> SUCCESS -> RETURNED
  PENDING -> IN_FLIGHT -> FAILURE -> FALLBACK_RETRY | BACKOFF_RETRY | TERMINAL_ERROR

Rate-limit and model-unavailable failures switch to the fallback model once,
with a fresh budget of 2 retries. Any other failure (or one that cannot
escalate) sleeps ``2 * (4 - retries_remaining)`` seconds before the next try.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum

from companion.errors import BackendError, GenerationError, NetworkError
from companion.llm_adapter.base import LLMProvider
from companion.llm_adapter.cache import CacheStore, compute_cache_key
from companion.llm_adapter.models import GenerationRequest
from companion.observability.metrics import (
    MetricsRecorder,
    llm_cache_lookups,
    llm_call_latency,
    llm_calls,
    llm_fallback_escalations,
)

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 3
FALLBACK_RETRIES = 2
DEFAULT_TIMEOUT_S = 30.0
BACKOFF_BASE_S = 2.0


class RetryDecision(str, Enum):
    """What follows a FAILURE."""

    FALLBACK_RETRY = "fallback_retry"
    BACKOFF_RETRY = "backoff_retry"
    TERMINAL_ERROR = "terminal_error"


def backoff_delay(retries_remaining: int) -> float:
    """Seconds to wait before the retry that consumes ``retries_remaining``."""
    return BACKOFF_BASE_S * (DEFAULT_RETRIES + 1 - retries_remaining)


class RetryExecutor:

    def __init__(
        self,
        provider: LLMProvider,
        cache: CacheStore,
        metrics: MetricsRecorder,
        fallback_model: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._metrics = metrics
        self._fallback_model = fallback_model
        self._timeout_s = timeout_s
        self._sleep = sleep

    @property
    def fallback_model(self) -> str:
        return self._fallback_model

    async def generate(
        self,
        request: GenerationRequest,
        retries: int = DEFAULT_RETRIES,
    ) -> str:
        """Return the generated text, or raise ``GenerationError``."""
        cache_key = request.cache_key or compute_cache_key(request.payload, request.model)

        if request.use_cache:
            cached = self._cache.get(cache_key)
            if cached is not None:
                llm_cache_lookups.labels(result="hit").inc()
                logger.debug("LLM cache HIT for key %s", cache_key[:48])
                return cached
            llm_cache_lookups.labels(result="miss").inc()
            logger.debug("LLM cache MISS for key %s", cache_key[:48])

        current = request.model_copy(update={"retries_remaining": retries})
        attempts = 0

        while True:
            attempts += 1
            started = time.perf_counter()
            try:
                text = await self._dispatch(current)
            except BackendError as exc:
                self._metrics.record(False)
                llm_calls.labels(model=current.model, outcome=exc.kind.value).inc()

                decision = self._next_decision(exc, current)
                if decision is RetryDecision.FALLBACK_RETRY:
                    logger.warning(
                        "%s on model %s; retrying with fallback model %s",
                        exc.kind.value, current.model, self._fallback_model,
                    )
                    llm_fallback_escalations.inc()
                    current = current.model_copy(
                        update={
                            "model": self._fallback_model,
                            "retries_remaining": FALLBACK_RETRIES,
                        }
                    )
                    continue

                if decision is RetryDecision.BACKOFF_RETRY:
                    delay = backoff_delay(current.retries_remaining)
                    logger.warning(
                        "%s on model %s (attempt %d); retrying in %.1fs, %d retries left",
                        exc.kind.value, current.model, attempts, delay,
                        current.retries_remaining - 1,
                    )
                    await self._sleep(delay)
                    current = current.model_copy(
                        update={"retries_remaining": current.retries_remaining - 1}
                    )
                    continue

                logger.error(
                    "Generation failed after %d attempts on model %s: %s",
                    attempts, current.model, exc,
                )
                raise GenerationError(exc.kind, str(exc), attempts) from exc

            duration_ms = (time.perf_counter() - started) * 1000
            self._metrics.record(True, duration_ms)
            llm_calls.labels(model=current.model, outcome="success").inc()
            llm_call_latency.labels(model=current.model).observe(duration_ms / 1000)

            if request.use_cache:
                self._cache.set(cache_key, text)
            return text

    async def _dispatch(self, request: GenerationRequest) -> str:
        try:
            response = await asyncio.wait_for(
                self._provider.generate(request), timeout=self._timeout_s
            )
        except asyncio.TimeoutError as exc:
            raise NetworkError(
                f"No response from backend within {self._timeout_s:.0f}s"
            ) from exc
        return response.content

    def _next_decision(self, error: BackendError, request: GenerationRequest) -> RetryDecision:
        if error.escalates_to_fallback and request.model != self._fallback_model:
            return RetryDecision.FALLBACK_RETRY
        if request.retries_remaining > 0:
            return RetryDecision.BACKOFF_RETRY
        return RetryDecision.TERMINAL_ERROR
