"""Async HTTP client that drives a study session against the API."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import httpx

from exam_prep.chat.models import ChatMessage
from exam_prep.core.exceptions import AppError
from exam_prep.core.logging import get_logger
from exam_prep.documents.gateway import settle_batch
from exam_prep.documents.models import BatchResult, ExtractedDocument, UploadedDocument
from exam_prep.session.study_session import StudySession

logger = get_logger(__name__)


class ApiRequestError(AppError):
    """The API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, code="API_REQUEST_ERROR")
        self.status_code = status_code or 500


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
        return data["error"]
    return default


class StudyChatClient:
    """Uploads material and runs chat turns, keeping all state locally.

    Upload batches are sent concurrently and settled independently; chat
    turns are serialized by the session's conversation state machine.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        session: StudySession | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or StudySession()
        self.timeout = timeout
        self._client = http_client

    @property
    def client(self) -> httpx.AsyncClient:
        """Get async HTTP client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> StudyChatClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def upload_file(self, upload: UploadedDocument) -> ExtractedDocument:
        """Upload one file and return its extracted text.

        Raises:
            ApiRequestError: If the server rejected the file
        """
        response = await self.client.post(
            "/api/upload",
            files={"file": (upload.filename, upload.content, upload.content_type or "application/octet-stream")},
        )
        if response.status_code != 200:
            raise ApiRequestError(_error_message(response, "Upload failed"), response.status_code)

        data = response.json()
        return ExtractedDocument(filename=data["filename"], text=data["text"])

    async def upload_files(self, uploads: Sequence[UploadedDocument]) -> BatchResult:
        """Upload a batch concurrently and merge whatever succeeded into the session."""
        batch = await settle_batch(uploads, self.upload_file)
        if batch.failed:
            logger.warning("upload_failed", filenames=batch.failed_filenames)

        self.session.apply_upload_batch(batch)
        return batch

    async def send(self, content: str) -> ChatMessage:
        """Run one chat turn and return the assistant message appended to the history.

        A failed request is recorded as an assistant message starting with "Error: ".
        If the task is cancelled the turn is failed and settled before the
        cancellation propagates, so the conversation can take the next turn.
        """
        conversation = self.session.conversation
        conversation.begin_turn(content)
        payload = self.session.chat_payload()

        try:
            response = await self.client.post("/api/chat", json=payload)
            if response.status_code != 200:
                raise ApiRequestError(
                    _error_message(response, "Failed to get response"), response.status_code
                )
            reply = response.json()["message"]
        except asyncio.CancelledError:
            logger.warning("chat_turn_cancelled")
            conversation.fail_turn("Request cancelled")
            conversation.settle()
            raise
        except Exception as e:
            logger.warning("chat_turn_failed", error=str(e))
            message = conversation.fail_turn(str(e) or "Something went wrong")
        else:
            message = conversation.complete_turn(reply)

        conversation.settle()
        return message
