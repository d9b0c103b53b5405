"""
OpenAI-compatible LLM provider.

Works with any API that speaks the OpenAI Chat Completions protocol:
  - OpenAI      (base_url=https://api.openai.com/v1)
  - Groq        (base_url=https://api.groq.com/openai/v1)
  - Google      (base_url=https://generativelanguage.googleapis.com/v1beta/openai)
  - OpenRouter  (base_url=https://openrouter.ai/api/v1)

SDK exceptions are classified here, at the only place the backend is called,
so callers never see an ``openai`` exception type.
"""

from __future__ import annotations

import os

from companion.errors import ServerError, classify_openai_error
from companion.llm_adapter.base import LLMProvider
from companion.llm_adapter.models import GenerationRequest, LLMResponse

_BASE_URLS: dict[str, str] = {
    "openai":     "https://api.openai.com/v1",
    "groq":       "https://api.groq.com/openai/v1",
    "gemini":     "https://generativelanguage.googleapis.com/v1beta/openai/",
    "openrouter": "https://openrouter.ai/api/v1",
}


class OpenAIProvider(LLMProvider):
    """
    OpenAI Chat Completions adapter.

    Reads from env:
      LLM_API_KEY          -- API key (also checked as OPENAI_API_KEY)
      LLM_BASE_URL         -- override the provider's base URL
      LLM_REQUEST_TIMEOUT  -- transport timeout in seconds (default 30)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        provider_name: str = "openai",
        timeout: float | None = None,
    ) -> None:
        self._provider_name = provider_name

        self._api_key = (
            api_key
            or os.environ.get("LLM_API_KEY", "")
            or os.environ.get("OPENAI_API_KEY", "")
        )
        # Ollama / LM Studio accept any key.
        if not self._api_key and provider_name == "local":
            self._api_key = "local-placeholder-key"
        elif not self._api_key:
            raise ValueError(
                f"An API key is required for provider '{provider_name}'. "
                "Set LLM_API_KEY (or OPENAI_API_KEY) in your environment."
            )

        self._base_url = (
            base_url
            or os.environ.get("LLM_BASE_URL", "")
            or _BASE_URLS.get(provider_name, _BASE_URLS["openai"])
        )

        try:
            from openai import AsyncOpenAI
        except ImportError as exc:
            raise ImportError(
                "openai package is required. Install it with: pip install openai"
            ) from exc

        if timeout is None:
            timeout = float(os.environ.get("LLM_REQUEST_TIMEOUT", "30"))
        # Retries are owned by RetryExecutor, not the SDK.
        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def generate(self, request: GenerationRequest) -> LLMResponse:
        kwargs: dict = {
            "model": request.model,
            "messages": [m.model_dump() for m in request.messages()],
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "top_p": request.top_p,
        }
        if request.response_format:
            kwargs["response_format"] = request.response_format

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except Exception as exc:
            raise classify_openai_error(exc) from exc

        if not getattr(response, "choices", None):
            raise ServerError(f"Backend returned an empty completion for model {request.model}")
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise ServerError(f"Malformed completion from model {request.model}") from exc
        usage = response.usage

        return LLMResponse(
            content=(content or "").strip(),
            model=response.model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
        )

    async def aclose(self) -> None:
        await self._client.close()
