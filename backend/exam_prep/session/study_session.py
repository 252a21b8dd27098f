"""Client-side study session: conversation plus uploaded material."""

from __future__ import annotations

from typing import Any

from exam_prep.documents.context import DocumentContext
from exam_prep.documents.models import BatchResult
from exam_prep.session.conversation import Conversation

QUICK_PROMPTS = (
    "Summarise the key points for this material",
    "What are the main concepts I should know for the exam?",
    "Create a study guide from this content",
    "Explain the most important ideas in simple terms",
)


class StudySession:
    """Everything the caller owns for one session.

    Neither the conversation nor the document context is stored server side;
    both travel with every chat request.
    """

    def __init__(self) -> None:
        self.conversation = Conversation()
        self.context = DocumentContext()
        self.upload_error = ""

    @property
    def uploaded_files(self) -> tuple[str, ...]:
        return self.context.filenames

    def apply_upload_batch(self, batch: BatchResult) -> str:
        """Merge the succeeded uploads and remember which files failed.

        Returns:
            The upload error message ("" when every file succeeded)
        """
        if batch.succeeded:
            self.context = self.context.merge(batch.succeeded)

        if batch.failed:
            self.upload_error = f"Failed to upload: {', '.join(batch.failed_filenames)}"
        else:
            self.upload_error = ""
        return self.upload_error

    def clear_documents(self) -> None:
        """Drop all uploaded material; the conversation is kept."""
        self.context = self.context.clear()

    def chat_payload(self) -> dict[str, Any]:
        """Request body for the chat endpoint."""
        payload: dict[str, Any] = {"messages": self.conversation.to_payload()}
        if not self.context.is_empty:
            payload["documentContext"] = self.context.text
        return payload
