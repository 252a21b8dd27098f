"""Conversation message model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

Role = Literal["user", "assistant"]
ROLES: frozenset[str] = frozenset({"user", "assistant"})


@dataclass(frozen=True)
class ChatMessage:
    """One entry of the conversation history."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ChatMessage:
        """Build a message from a {"role", "content"} mapping.

        Raises:
            ValueError: If the role is not user/assistant or content is not a string
        """
        role = data.get("role")
        content = data.get("content")
        if role not in ROLES:
            raise ValueError(f"Invalid message role: {role!r}")
        if not isinstance(content, str):
            raise ValueError("Message content must be a string")
        return cls(role=role, content=content)
