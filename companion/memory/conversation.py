"""
Per-session conversation memory.

Each session keeps at most ``max_messages`` messages; the oldest are dropped
first after every append, together with any assistant reply left leading the
history. Sessions themselves are never evicted by the store,
only by an explicit ``forget``.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

from pydantic import BaseModel

from companion.llm_adapter.models import ChatMessage, GenerationRequest
from companion.llm_adapter.retry import RetryExecutor
from companion.logging.logger import log_context

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGES = 10


@dataclass
class ConversationSession:
    id: str
    messages: list[ChatMessage] = field(default_factory=list)

    def append(self, role: str, content: str, limit: int) -> None:
        self.messages.append(ChatMessage(role=role, content=content))
        if len(self.messages) > limit:
            del self.messages[: len(self.messages) - limit]
            # history sent to the backend must open on a user turn
            while self.messages and self.messages[0].role == "assistant":
                del self.messages[0]


class ConversationReply(BaseModel):
    session_id: str
    response: str
    conversation_length: int


class ConversationMemory:

    def __init__(
        self,
        executor: RetryExecutor,
        max_messages: int = DEFAULT_MAX_MESSAGES,
    ) -> None:
        self._executor = executor
        self._max_messages = max_messages
        self._sessions: dict[str, ConversationSession] = {}

    async def converse(
        self,
        session_id: str | None,
        prompt: str,
        template: GenerationRequest,
    ) -> ConversationReply:
        """
        Run one user turn against the session's full history.

        ``template`` supplies model and sampling parameters; its payload is
        replaced by the history and caching is always disabled. If the backend
        fails, the user message stays in the history and the error propagates.
        """
        if not session_id:
            session_id = str(uuid.uuid4())

        session = self._sessions.get(session_id)
        if session is None:
            session = ConversationSession(id=session_id)
            self._sessions[session_id] = session
            logger.info("Started conversation session %s", session_id[:8])

        session.append("user", prompt, self._max_messages)

        request = template.model_copy(
            update={
                "payload": list(session.messages),
                "use_cache": False,
                "cache_key": None,
            }
        )
        with log_context(session_id=session_id):
            response = await self._executor.generate(request)

        session.append("assistant", response, self._max_messages)
        return ConversationReply(
            session_id=session_id,
            response=response,
            conversation_length=len(session.messages),
        )

    def get(self, session_id: str) -> ConversationSession | None:
        return self._sessions.get(session_id)

    def forget(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
