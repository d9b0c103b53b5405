from companion.llm_adapter.base import LLMProvider
from companion.llm_adapter.cache import CacheStore, compute_cache_key, translation_cache_key
from companion.llm_adapter.factory import build_llm_provider
from companion.llm_adapter.models import (
    ChatMessage,
    GenerationOptions,
    GenerationRequest,
    LLMResponse,
)
from companion.llm_adapter.mock_provider import MockProvider
from companion.llm_adapter.retry import RetryExecutor

__all__ = [
    "LLMProvider",
    "ChatMessage",
    "GenerationOptions",
    "GenerationRequest",
    "LLMResponse",
    "CacheStore",
    "MockProvider",
    "RetryExecutor",
    "build_llm_provider",
    "compute_cache_key",
    "translation_cache_key",
]
