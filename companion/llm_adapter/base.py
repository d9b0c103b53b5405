"""Abstract base class that all LLM providers must implement."""

from __future__ import annotations

from abc import ABC, abstractmethod

from companion.llm_adapter.models import GenerationRequest, LLMResponse


class LLMProvider(ABC):
    """
    Contract for LLM providers.

    Every implementation MUST:
    - Send ``request.messages()`` with the request's sampling parameters
    - Raise only ``companion.errors.BackendError`` subclasses on failure
    """

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> LLMResponse:
        """Send a request and return the model's response."""

    async def aclose(self) -> None:
        """Release transport resources. No-op by default."""
