"""Unit tests for the TTL response cache and cache-key helpers."""

from companion.llm_adapter.cache import (
    CacheStore,
    compute_cache_key,
    translation_cache_key,
)
from companion.llm_adapter.models import ChatMessage


class TestCacheStore:

    def test_missing_key_is_a_miss(self, cache):
        assert cache.get("nope") is None

    def test_set_then_get(self, cache):
        cache.set("k", "value")
        assert cache.get("k") == "value"

    def test_set_overwrites_and_restamps(self, cache, clock):
        cache.set("k", "old")
        clock.advance(3000)
        cache.set("k", "new")
        clock.advance(3000)
        assert cache.get("k") == "new"

    def test_entry_valid_just_before_ttl(self, cache, clock):
        cache.set("k", "value")
        clock.advance(3599.999)
        assert cache.get("k") == "value"

    def test_entry_expires_at_ttl(self, cache, clock):
        cache.set("k", "value")
        clock.advance(3600)
        assert cache.get("k") is None

    def test_expired_entries_are_not_deleted_eagerly(self, cache, clock):
        cache.set("k", "value")
        clock.advance(7200)
        assert cache.get("k") is None
        assert len(cache) == 1

    def test_clear(self, cache):
        cache.set("a", "1")
        cache.set("b", "2")
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_custom_ttl(self, clock):
        store = CacheStore(ttl_seconds=10, clock=clock)
        store.set("k", "v")
        clock.advance(10)
        assert store.get("k") is None


class TestComputeCacheKey:

    def test_format(self):
        key = compute_cache_key("hello", "gpt-4")
        model, digest, length = key.split(":")
        assert model == "gpt-4"
        assert len(digest) == 64
        assert length == "5"

    def test_length_is_capped_at_100(self):
        key = compute_cache_key("x" * 500, "gpt-4")
        assert key.endswith(":100")

    def test_deterministic(self):
        assert compute_cache_key("same", "m") == compute_cache_key("same", "m")

    def test_model_is_part_of_the_key(self):
        assert compute_cache_key("same", "a") != compute_cache_key("same", "b")

    def test_long_prompts_with_same_capped_length_still_differ(self):
        assert compute_cache_key("a" * 200, "m") != compute_cache_key("b" * 200, "m")

    def test_message_payload(self):
        messages = [
            ChatMessage(role="user", content="hi"),
            ChatMessage(role="assistant", content="hello"),
        ]
        assert compute_cache_key(messages, "m") == compute_cache_key(
            "user: hi\nassistant: hello", "m"
        )


class TestTranslationCacheKey:

    def test_uses_fifty_character_prefix(self):
        shared = "A" * 50
        first = translation_cache_key("gpt-4", "en", "fr", shared + " first ending")
        second = translation_cache_key("gpt-4", "en", "fr", shared + " second ending")
        assert first == second

    def test_language_pair_matters(self):
        assert translation_cache_key("m", "en", "fr", "Hello") != translation_cache_key(
            "m", "en", "de", "Hello"
        )

    def test_short_text(self):
        assert translation_cache_key("m", "en", "fr", "Hello") == "translation:m:en:fr:Hello"
