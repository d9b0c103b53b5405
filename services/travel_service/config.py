from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TravelConfig:
    llm_provider: str
    model: str
    fallback_model: str
    insights_tokens: int
    itinerary_tokens: int
    translation_tokens: int
    request_timeout_s: float
    cache_ttl_seconds: float
    max_conversation_messages: int
    log_level: str

    @classmethod
    def from_env(cls) -> TravelConfig:
        return cls(
            llm_provider=os.environ.get("LLM_PROVIDER", "mock"),
            model=os.environ.get("OPENAI_MODEL", "gpt-4"),
            fallback_model=os.environ.get("FALLBACK_MODEL", "gpt-3.5-turbo"),
            insights_tokens=int(os.environ.get("CULTURAL_INSIGHTS_TOKENS", "1000")),
            itinerary_tokens=int(os.environ.get("ITINERARY_TOKENS", "1500")),
            translation_tokens=int(os.environ.get("TRANSLATION_TOKENS", "500")),
            request_timeout_s=float(os.environ.get("LLM_REQUEST_TIMEOUT", "30")),
            cache_ttl_seconds=float(os.environ.get("CACHE_TTL_SECONDS", "3600")),
            max_conversation_messages=int(os.environ.get("MAX_CONVERSATION_MESSAGES", "10")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
