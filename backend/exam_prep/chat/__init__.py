"""Chat orchestration - prompt assembly and completion calls."""

from exam_prep.chat.models import ChatMessage
from exam_prep.chat.orchestrator import ChatOrchestrator

__all__ = ["ChatMessage", "ChatOrchestrator"]
