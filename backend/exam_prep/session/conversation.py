"""Caller-owned conversation history with an explicit turn lifecycle.

    IDLE --begin_turn--> SUBMITTING --complete_turn--> SUCCEEDED --settle--> IDLE
                                    --fail_turn-----> FAILED    --settle--> IDLE

Every turn appends exactly one user message and then exactly one assistant
message (the reply, or the error text). Entries are never removed.
"""

from __future__ import annotations

from enum import Enum

from exam_prep.chat.models import ChatMessage
from exam_prep.core.exceptions import InvalidRequestError, TurnInProgressError

ERROR_PREFIX = "Error: "


class TurnState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS: dict[TurnState, set[TurnState]] = {
    TurnState.IDLE: {TurnState.SUBMITTING},
    TurnState.SUBMITTING: {TurnState.SUCCEEDED, TurnState.FAILED},
    TurnState.SUCCEEDED: {TurnState.IDLE},
    TurnState.FAILED: {TurnState.IDLE},
}


class Conversation:
    """Ordered, append-only list of chat turns."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self.state = TurnState.IDLE

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def is_submitting(self) -> bool:
        return self.state is TurnState.SUBMITTING

    def __len__(self) -> int:
        return len(self._messages)

    def _transition(self, target: TurnState) -> None:
        if target not in _TRANSITIONS[self.state]:
            if self.state is TurnState.SUBMITTING:
                raise TurnInProgressError()
            raise RuntimeError(f"Invalid turn transition: {self.state.value} -> {target.value}")
        self.state = target

    def begin_turn(self, content: str) -> list[ChatMessage]:
        """Append the user's message and return the history to send.

        A turn left in SUCCEEDED/FAILED is settled first.
        """
        content = content.strip()
        if not content:
            raise InvalidRequestError("Message must not be empty")

        if self.state in (TurnState.SUCCEEDED, TurnState.FAILED):
            self.settle()
        self._transition(TurnState.SUBMITTING)
        self._messages.append(ChatMessage(role="user", content=content))
        return list(self._messages)

    def complete_turn(self, reply: str) -> ChatMessage:
        self._transition(TurnState.SUCCEEDED)
        message = ChatMessage(role="assistant", content=reply)
        self._messages.append(message)
        return message

    def fail_turn(self, error: str) -> ChatMessage:
        """Record a failed turn as an assistant message carrying the error."""
        self._transition(TurnState.FAILED)
        message = ChatMessage(role="assistant", content=f"{ERROR_PREFIX}{error}")
        self._messages.append(message)
        return message

    def settle(self) -> None:
        self._transition(TurnState.IDLE)

    def to_payload(self) -> list[dict[str, str]]:
        return [message.to_dict() for message in self._messages]
