"""
Provider factory -- single entry point for choosing the backend.

Reads LLM_PROVIDER from env (default: 'mock') and returns a fresh provider.
Caching, retries and fallback live in RetryExecutor, so providers stay thin.

Supported providers:

  mock        Built-in deterministic mock, no API key needed (default)
  openai      OpenAI API  -- needs OPENAI_API_KEY or LLM_API_KEY
  groq        Groq API    -- needs LLM_API_KEY
  gemini      Google AI   -- needs LLM_API_KEY
  openrouter  OpenRouter  -- needs LLM_API_KEY
  local       Any OpenAI-compatible local server
                            e.g. Ollama / LM Studio (no key required)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from companion.llm_adapter.base import LLMProvider
from companion.llm_adapter.mock_provider import MockProvider

logger = logging.getLogger(__name__)

_OPENAI_COMPATIBLE = {"openai", "groq", "gemini", "openrouter", "local"}

_PROVIDERS: dict[str, Callable[[], LLMProvider]] = {
    "mock": MockProvider,
}


def _register_openai_compatible(name: str) -> None:
    """Lazy-register any OpenAI-compatible provider."""
    from companion.llm_adapter.openai_provider import OpenAIProvider

    def _factory() -> OpenAIProvider:
        return OpenAIProvider(provider_name=name)

    _PROVIDERS[name] = _factory


def build_llm_provider(provider_name: str | None = None) -> LLMProvider:
    """
    Build the provider for the configured backend.

    Args:
        provider_name: Override for LLM_PROVIDER env var.
    """
    name = (provider_name or os.environ.get("LLM_PROVIDER", "mock")).lower()

    if name in _OPENAI_COMPATIBLE and name not in _PROVIDERS:
        _register_openai_compatible(name)

    provider_factory = _PROVIDERS.get(name)
    if provider_factory is None:
        raise ValueError(
            f"Unknown LLM provider '{name}'. "
            f"Available: mock, openai, groq, gemini, openrouter, local"
        )

    provider = provider_factory()
    logger.info("LLM provider initialized: %s", name)
    return provider
