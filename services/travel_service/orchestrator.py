"""
Travel operations on top of the resilient generation layer.

Each operation follows the same shape: validate inputs, build the prompt,
resolve it through RetryExecutor with operation-specific tuning, then parse
the text. Validation failures are raised before any backend call.
"""

from __future__ import annotations

import logging
from typing import Any

from companion.errors import ValidationError
from companion.llm_adapter.base import LLMProvider
from companion.llm_adapter.cache import CacheStore, translation_cache_key
from companion.llm_adapter.models import GenerationOptions, GenerationRequest
from companion.llm_adapter.retry import RetryExecutor
from companion.logging.logger import log_context
from companion.memory.conversation import ConversationMemory, ConversationReply
from companion.observability.metrics import MetricsRecorder, MetricsSnapshot
from services.travel_service.config import TravelConfig
from services.travel_service.parsers import (
    TranslationResult,
    parse_insights,
    parse_itinerary,
    parse_translation,
)
from services.travel_service.prompts import (
    build_insights_prompt,
    build_itinerary_prompt,
    build_translation_prompt,
)

logger = logging.getLogger(__name__)

INSIGHTS_TEMPERATURE = 0.7
ITINERARY_TEMPERATURE = 0.5
TRANSLATION_TEMPERATURE = 0.3
CHAT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9


def _require(value: Any, field: str, message: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field, message)
    if isinstance(value, (dict, list)) and not value:
        raise ValidationError(field, message)


class TravelOrchestrator:

    def __init__(
        self,
        config: TravelConfig,
        executor: RetryExecutor,
        cache: CacheStore,
        metrics: MetricsRecorder,
        memory: ConversationMemory,
    ) -> None:
        self._config = config
        self._executor = executor
        self._cache = cache
        self._metrics = metrics
        self._memory = memory

    def _request(
        self,
        payload: str,
        options: GenerationOptions | None,
        *,
        max_tokens: int,
        temperature: float,
        response_format: dict[str, Any] | None = None,
        cache_key: str | None = None,
    ) -> GenerationRequest:
        options = options or GenerationOptions()
        return GenerationRequest(
            payload=payload,
            model=options.model or self._config.model,
            max_tokens=options.max_tokens or max_tokens,
            temperature=options.temperature if options.temperature is not None else temperature,
            top_p=options.top_p or DEFAULT_TOP_P,
            response_format=response_format,
            cache_key=cache_key,
        )

    async def insights(
        self,
        destination: str,
        options: GenerationOptions | None = None,
    ) -> Any:
        _require(destination, "destination", "Destination is required for cultural insights")

        request = self._request(
            build_insights_prompt(destination),
            options,
            max_tokens=self._config.insights_tokens,
            temperature=INSIGHTS_TEMPERATURE,
            response_format={"type": "json_object"},
        )
        with log_context(operation="insights", destination=destination):
            text = await self._executor.generate(request)
            logger.info("Cultural insights generated (%d chars)", len(text))
        return parse_insights(text)

    async def itinerary(
        self,
        destination: str,
        traveler_profile: dict[str, Any],
        options: GenerationOptions | None = None,
    ) -> Any:
        _require(destination, "destination", "Destination is required for itinerary generation")
        _require(
            traveler_profile,
            "traveler_profile",
            "Traveler profile is required for personalized itinerary",
        )

        request = self._request(
            build_itinerary_prompt(destination, traveler_profile),
            options,
            max_tokens=self._config.itinerary_tokens,
            temperature=ITINERARY_TEMPERATURE,
        )
        with log_context(operation="itinerary", destination=destination):
            text = await self._executor.generate(request)
            logger.info("Itinerary generated (%d chars)", len(text))
        return parse_itinerary(text)

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        options: GenerationOptions | None = None,
    ) -> str | TranslationResult:
        _require(text, "text", "Text is required for translation")
        _require(source_lang, "source_lang", "Source and target languages are required")
        _require(target_lang, "target_lang", "Source and target languages are required")

        model = (options.model if options else None) or self._config.model
        request = self._request(
            build_translation_prompt(text, source_lang, target_lang),
            options,
            max_tokens=self._config.translation_tokens,
            temperature=TRANSLATION_TEMPERATURE,
            cache_key=translation_cache_key(model, source_lang, target_lang, text),
        )
        with log_context(operation="translate", languages=f"{source_lang}->{target_lang}"):
            raw = await self._executor.generate(request)
            logger.info("Translated %d chars", len(text))
        return parse_translation(raw)

    async def converse(
        self,
        session_id: str | None,
        prompt: str,
        options: GenerationOptions | None = None,
    ) -> ConversationReply:
        _require(prompt, "message", "A message is required to continue the conversation")

        template = self._request(
            prompt,
            options,
            max_tokens=self._config.itinerary_tokens,
            temperature=CHAT_TEMPERATURE,
        )
        with log_context(operation="converse"):
            return await self._memory.converse(session_id, prompt, template)

    def metrics(self) -> MetricsSnapshot:
        return self._metrics.snapshot()

    def reset_cache(self) -> None:
        self._cache.clear()
        logger.info("Response cache cleared")

    def forget_session(self, session_id: str) -> bool:
        return self._memory.forget(session_id)


def build_orchestrator(
    config: TravelConfig,
    provider: LLMProvider,
    **executor_kwargs: Any,
) -> TravelOrchestrator:
    """Wire the state objects owned by one orchestrator instance."""
    cache = CacheStore(ttl_seconds=config.cache_ttl_seconds)
    metrics = MetricsRecorder()
    executor = RetryExecutor(
        provider,
        cache,
        metrics,
        fallback_model=config.fallback_model,
        timeout_s=config.request_timeout_s,
        **executor_kwargs,
    )
    memory = ConversationMemory(executor, max_messages=config.max_conversation_messages)
    return TravelOrchestrator(config, executor, cache, metrics, memory)
