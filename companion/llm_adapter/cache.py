"""
LLM response caching layer.

Process-local key->text store with a fixed time-to-live. Expired entries are
reported as misses and left in place until overwritten or cleared.
"""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from companion.llm_adapter.models import ChatMessage, payload_text

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0
_KEY_LENGTH_CAP = 100
_TRANSLATION_PREFIX_CHARS = 50


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: str
    stored_at: float


class CacheStore:

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            logger.debug("Cache entry expired for key %s", key[:48])
            return None
        return entry.value

    def set(self, key: str, value: str) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def compute_cache_key(payload: str | list[ChatMessage], model: str) -> str:
    """``{model}:{sha256 of full content}:{min(len(content), 100)}``."""
    content = payload_text(payload)
    digest = hashlib.sha256(content.encode()).hexdigest()
    return f"{model}:{digest}:{min(len(content), _KEY_LENGTH_CAP)}"


def translation_cache_key(model: str, source_lang: str, target_lang: str, text: str) -> str:
    """
    Key on the language pair and the first 50 characters of the text only.

    Distinct texts sharing that prefix resolve to the same entry.
    """
    return (
        f"translation:{model}:{source_lang}:{target_lang}:"
        f"{text[:_TRANSLATION_PREFIX_CHARS]}"
    )
