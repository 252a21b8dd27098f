"""Caller-side session state: conversation turns and uploaded material."""

from exam_prep.session.client import StudyChatClient
from exam_prep.session.conversation import Conversation, TurnState
from exam_prep.session.study_session import QUICK_PROMPTS, StudySession

__all__ = ["Conversation", "TurnState", "StudySession", "StudyChatClient", "QUICK_PROMPTS"]
