"""
Deterministic mock LLM provider for testing and development.

Without a script it always returns the same output for the same prompt hash,
making the whole service runnable without network calls. A script of replies
and/or ``BackendError`` instances is consumed first, one item per call.
"""

from __future__ import annotations

import hashlib
from collections import deque
from collections.abc import Iterable

from companion.errors import BackendError
from companion.llm_adapter.base import LLMProvider
from companion.llm_adapter.models import GenerationRequest, LLMResponse

_MOCK_PREFIX = "[MOCK] "


class MockProvider(LLMProvider):

    def __init__(self, script: Iterable[str | BackendError] = ()) -> None:
        self._script: deque[str | BackendError] = deque(script)
        self.requests: list[GenerationRequest] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def enqueue(self, *items: str | BackendError) -> None:
        self._script.extend(items)

    async def generate(self, request: GenerationRequest) -> LLMResponse:
        self.requests.append(request)
        prompt = request.content_text()

        if self._script:
            item = self._script.popleft()
            if isinstance(item, BackendError):
                raise item
            content = item
        else:
            prompt_hash = hashlib.sha256(prompt.encode()).hexdigest()
            content = (
                f"{_MOCK_PREFIX}Deterministic response for prompt hash "
                f"{prompt_hash[:12]}."
            )

        fake_prompt_tokens = len(prompt.split())
        fake_completion_tokens = len(content.split())

        return LLMResponse(
            content=content,
            model=request.model,
            prompt_tokens=fake_prompt_tokens,
            completion_tokens=fake_completion_tokens,
            total_tokens=fake_prompt_tokens + fake_completion_tokens,
        )
