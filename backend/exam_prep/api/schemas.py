"""Request and response schemas for the API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# --- Request Models ---


class ChatMessageSchema(BaseModel):
    """One conversation entry sent by the client."""

    role: Literal["user", "assistant"] = Field(..., description="Message author")
    content: str = Field(..., description="Message text")


class ChatRequest(BaseModel):
    """Chat request schema.

    The client sends its whole conversation and document context on every turn.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessageSchema] = Field(..., description="Conversation history, oldest first")
    document_context: str | None = Field(
        default=None,
        alias="documentContext",
        description="Merged text of the uploaded documents",
    )


# --- Response Models ---


class ChatResponse(BaseModel):
    """Chat response schema."""

    message: str = Field(..., description="Assistant response (Markdown)")


class FileUploadResponse(BaseModel):
    """File upload response with the extracted text."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, description="Extraction succeeded")
    filename: str = Field(..., description="Original filename")
    text: str = Field(..., description="Extracted text")
    char_count: int = Field(..., alias="charCount", description="Length of text in characters")


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    llm_provider: str = Field(..., description="Configured completion provider")
    llm_model: str = Field(..., description="Configured completion model")
    max_upload_bytes: int = Field(..., description="Upload size ceiling in bytes")
