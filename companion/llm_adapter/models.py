"""Data models for the LLM adapter layer."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: Role
    content: str


def payload_text(payload: str | list[ChatMessage]) -> str:
    """Flatten a prompt or message list into the text used for cache hashing."""
    if isinstance(payload, str):
        return payload
    return "\n".join(f"{m.role}: {m.content}" for m in payload)


class GenerationOptions(BaseModel):
    """Per-call overrides. Unset fields fall back to the operation defaults."""

    model: str | None = None
    max_tokens: int | None = Field(default=None, ge=1)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    top_p: float | None = Field(default=None, gt=0.0, le=1.0)


class GenerationRequest(BaseModel):
    """
    One dispatch to the backend.

    Frozen: a retry or fallback creates a new instance via ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    payload: str | list[ChatMessage]
    model: str
    max_tokens: int = Field(default=1500, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_p: float = Field(default=0.9, gt=0.0, le=1.0)
    response_format: dict[str, Any] | None = None
    cache_key: str | None = None
    use_cache: bool = True
    retries_remaining: int = Field(default=3, ge=0)

    def messages(self) -> list[ChatMessage]:
        if isinstance(self.payload, str):
            return [ChatMessage(role="user", content=self.payload)]
        return list(self.payload)

    def content_text(self) -> str:
        return payload_text(self.payload)


class LLMResponse(BaseModel):
    content: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
