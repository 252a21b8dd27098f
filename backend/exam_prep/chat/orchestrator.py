"""Chat orchestration: system prompt + document context + history -> one completion."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from exam_prep.chat.models import ChatMessage
from exam_prep.chat.prompts import build_system_content
from exam_prep.core.exceptions import AppError, BackendError, EmptyReplyError, InvalidRequestError
from exam_prep.core.logging import get_logger
from exam_prep.core.protocols import LLMProvider

logger = get_logger(__name__)


def normalize_history(history: Any) -> list[ChatMessage]:
    """Validate the conversation history and return it as ChatMessage objects.

    Raises:
        InvalidRequestError: If history is empty, not a sequence, or holds a bad entry
    """
    if not isinstance(history, Sequence) or isinstance(history, str | bytes):
        raise InvalidRequestError("Messages array is required")
    if not history:
        raise InvalidRequestError("Messages array must not be empty")

    messages = []
    for index, entry in enumerate(history):
        if isinstance(entry, ChatMessage):
            messages.append(entry)
            continue
        if not isinstance(entry, Mapping):
            raise InvalidRequestError(f"Message {index} must be an object with role and content")
        try:
            messages.append(ChatMessage.from_mapping(entry))
        except ValueError as e:
            raise InvalidRequestError(f"Message {index}: {e}") from e
    return messages


def build_messages(
    history: Sequence[ChatMessage], document_context: str | None = None
) -> list[dict[str, str]]:
    """Prepend a single system entry to the history."""
    return [
        {"role": "system", "content": build_system_content(document_context)},
        *(message.to_dict() for message in history),
    ]


class ChatOrchestrator:
    """Answers one chat turn with a single, blocking completion call.

    The orchestrator is stateless: history and document context are passed in
    on every call and never modified. Failures are terminal for the turn.
    """

    def __init__(self, llm_factory: Callable[[], LLMProvider]):
        # Resolved per call so credentials are read when the request arrives
        self._llm_factory = llm_factory

    async def respond(
        self,
        history: Sequence[ChatMessage | Mapping[str, Any]],
        document_context: str | None = None,
    ) -> str:
        """Generate the assistant reply for a conversation.

        Args:
            history: Prior turns, ending with the user's new message
            document_context: Merged text of the uploaded documents

        Returns:
            The backend's reply, verbatim

        Raises:
            InvalidRequestError: Malformed history (backend not contacted)
            ConfigurationError: Backend credentials are missing
            BackendError: The completion call failed
            EmptyReplyError: The backend returned no content
        """
        messages = build_messages(normalize_history(history), document_context)

        llm = self._llm_factory()
        provider = getattr(llm, "provider_name", type(llm).__name__)

        start_time = time.perf_counter()
        try:
            reply = await llm.generate(messages)
        except AppError:
            raise
        except Exception as e:
            logger.error("completion_failed", provider=provider, error=str(e))
            raise BackendError(f"Chat failed: {e}", provider=provider) from e

        if not reply:
            logger.warning("completion_empty", provider=provider)
            raise EmptyReplyError(provider=provider)

        logger.info(
            "completion_succeeded",
            provider=provider,
            turns=len(messages) - 1,
            context_chars=len(document_context or ""),
            reply_chars=len(reply),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return reply
