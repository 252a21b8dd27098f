"""Custom exception hierarchy."""

from typing import Any


class AppError(Exception):
    """Base application exception."""

    status_code: int = 500

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {"error": self.message}


# --- Request validation ---


class ValidationError(AppError):
    """Bad input shape, unsupported type or oversized payload."""

    status_code = 400

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)


class MissingFileError(ValidationError):
    """No file was attached to the upload."""

    def __init__(self, message: str = "No file provided"):
        super().__init__(message, code="MISSING_FILE")


class UnsupportedTypeError(ValidationError):
    """Uploaded file is not PDF, PPTX, DOCX or plain text."""

    def __init__(
        self,
        content_type: str | None = None,
        message: str = "Unsupported file type. Please upload PDF, PPTX, DOCX, or TXT files.",
    ):
        self.content_type = content_type
        super().__init__(message, code="UNSUPPORTED_TYPE")


def format_size(num_bytes: int) -> str:
    """Render a byte count the way limits are usually quoted (20MB, 512KB)."""
    if num_bytes >= 1024 * 1024 and num_bytes % (1024 * 1024) == 0:
        return f"{num_bytes // (1024 * 1024)}MB"
    if num_bytes >= 1024 and num_bytes % 1024 == 0:
        return f"{num_bytes // 1024}KB"
    return f"{num_bytes} bytes"


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the size ceiling."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large. Maximum size is {format_size(limit)}.",
            code="FILE_TOO_LARGE",
        )


class InvalidRequestError(ValidationError):
    """Malformed chat request."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_REQUEST")


# --- Text extraction ---


class ExtractionError(AppError):
    """The extractor could not produce usable text for one file."""

    def __init__(self, message: str, filename: str | None = None, code: str = "EXTRACTION_ERROR"):
        self.filename = filename
        super().__init__(message, code=code)


class EmptyContentError(ExtractionError):
    """Extraction succeeded but produced only whitespace."""

    status_code = 400

    def __init__(self, filename: str | None = None):
        super().__init__(
            "Could not extract text from this file. It may be empty or scanned.",
            filename=filename,
            code="EMPTY_CONTENT",
        )


class ExtractorFailedError(ExtractionError):
    """The format extractor raised (corrupt, encrypted or unreadable file)."""

    status_code = 500

    def __init__(self, detail: str, filename: str | None = None):
        self.detail = detail
        super().__init__(f"Upload failed: {detail}", filename=filename, code="EXTRACTOR_FAILED")


# --- Completion backend ---


class ConfigurationError(AppError):
    """Configuration error."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIG_ERROR")


class BackendError(AppError):
    """Completion backend call failed."""

    def __init__(self, message: str, provider: str, code: str = "BACKEND_ERROR"):
        self.provider = provider
        super().__init__(message, code=code)


class EmptyReplyError(BackendError):
    """Completion backend answered without any content."""

    def __init__(self, provider: str):
        super().__init__(f"No response from {provider}", provider=provider, code="EMPTY_REPLY")


# --- Caller side ---


class TurnInProgressError(AppError):
    """A chat turn was started while another one is still outstanding."""

    status_code = 409

    def __init__(self, message: str = "A response is still being generated"):
        super().__init__(message, code="TURN_IN_PROGRESS")
