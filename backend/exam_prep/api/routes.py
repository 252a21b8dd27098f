"""API routes for the study chat."""

import time

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, Request, UploadFile
from pydantic import ValidationError as PydanticValidationError

from exam_prep.api.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    FileUploadResponse,
    HealthResponse,
)
from exam_prep.chat.models import ChatMessage
from exam_prep.chat.orchestrator import ChatOrchestrator
from exam_prep.core.config import AppConfig, load_llm_config
from exam_prep.core.di_container import DIContainer
from exam_prep.core.exceptions import AppError, InvalidRequestError
from exam_prep.core.logging import log_request
from exam_prep.documents.gateway import ExtractionGateway
from exam_prep.documents.models import UploadedDocument

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Server or backend failure"},
}


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


async def parse_chat_request(request: Request) -> ChatRequest:
    """Read and validate the chat body, reporting problems as 400 errors."""
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidRequestError("Request body must be valid JSON") from e

    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        raise InvalidRequestError("Messages array is required")

    try:
        return ChatRequest.model_validate(body)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidRequestError(f"Invalid {location}: {first['msg']}") from e


@router.post("/upload", response_model=FileUploadResponse, responses=ERROR_RESPONSES)
@inject
async def upload_file(
    file: UploadFile | None = File(default=None),  # noqa: B008
    gateway: ExtractionGateway = Depends(Provide[DIContainer.extraction_gateway]),  # noqa: B008
) -> FileUploadResponse:
    """Upload one study document and return its extracted text.

    Supports PDF, PPTX, DOCX and plain text files up to the configured size limit.
    Nothing is stored: the client merges the text into its own document context.
    """
    start_time = time.perf_counter()
    filename = (file.filename or "unknown") if file is not None else None
    try:
        upload = None
        if file is not None:
            # Reject on the declared part size before pulling the body into memory
            gateway.check_declared(filename, file.content_type, file.size)
            upload = UploadedDocument(
                filename=filename,
                content=await file.read(),
                content_type=file.content_type or "",
            )
        document = await gateway.extract(upload)
    except AppError as e:
        log_request(
            method="POST",
            path="/api/upload",
            filename=filename,
            duration_ms=_elapsed_ms(start_time),
            status="rejected" if e.status_code < 500 else "error",
            error=e.message,
        )
        raise

    log_request(
        method="POST",
        path="/api/upload",
        filename=document.filename,
        response=document.text,
        duration_ms=_elapsed_ms(start_time),
    )
    return FileUploadResponse(
        filename=document.filename,
        text=document.text,
        char_count=document.char_count,
    )


@router.post("/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
@inject
async def chat(
    request: Request,
    orchestrator: ChatOrchestrator = Depends(Provide[DIContainer.chat_orchestrator]),  # noqa: B008
) -> ChatResponse:
    """Answer the latest user message using the conversation and document context."""
    start_time = time.perf_counter()
    chat_request = await parse_chat_request(request)
    history = [ChatMessage(role=m.role, content=m.content) for m in chat_request.messages]
    last_user_message = next((m.content for m in reversed(history) if m.role == "user"), None)

    try:
        reply = await orchestrator.respond(history, chat_request.document_context)
    except AppError as e:
        log_request(
            method="POST",
            path="/api/chat",
            user_message=last_user_message,
            turns=len(history),
            context_chars=len(chat_request.document_context or ""),
            duration_ms=_elapsed_ms(start_time),
            status="rejected" if e.status_code < 500 else "error",
            error=e.message,
        )
        raise

    log_request(
        method="POST",
        path="/api/chat",
        user_message=last_user_message,
        response=reply,
        turns=len(history),
        context_chars=len(chat_request.document_context or ""),
        duration_ms=_elapsed_ms(start_time),
    )
    return ChatResponse(message=reply)


@router.get("/health", response_model=HealthResponse)
@inject
async def health(
    config: AppConfig = Depends(Provide[DIContainer.config]),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    llm_config = load_llm_config()
    return HealthResponse(
        status="ok",
        llm_provider=llm_config.provider,
        llm_model=llm_config.model,
        max_upload_bytes=config.upload.max_file_size_bytes,
    )
