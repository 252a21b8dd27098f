"""Upload validation and text extraction."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from exam_prep.core.config import MAX_UPLOAD_BYTES
from exam_prep.core.exceptions import (
    AppError,
    EmptyContentError,
    ExtractorFailedError,
    FileTooLargeError,
    MissingFileError,
    UnsupportedTypeError,
)
from exam_prep.core.logging import get_logger
from exam_prep.core.protocols import TextExtractor
from exam_prep.documents.extractors import DOCX_MIME, PDF_MIME, PPTX_MIME, TEXT_MIME
from exam_prep.documents.models import (
    BatchResult,
    ExtractedDocument,
    FailedUpload,
    UploadedDocument,
)

logger = get_logger(__name__)

ALLOWED_TYPES = frozenset({PDF_MIME, PPTX_MIME, DOCX_MIME, TEXT_MIME})


def normalize_content_type(content_type: str | None) -> str:
    """Strip parameters (e.g. charset) and lowercase a MIME type."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_plain_text(filename: str, content_type: str | None) -> bool:
    """Plain text is recognised by its MIME type or a .txt file name."""
    return normalize_content_type(content_type) == TEXT_MIME or filename.lower().endswith(".txt")


class ExtractionGateway:
    """Validates uploads and turns them into extracted text.

    Each call is self-contained: nothing is written to disk and no state is
    kept between calls, so extractions for a batch can run concurrently.
    """

    def __init__(self, extractor: TextExtractor, max_file_size: int = MAX_UPLOAD_BYTES):
        self.extractor = extractor
        self.max_file_size = max_file_size

    def validate(self, upload: UploadedDocument | None) -> bool:
        """Check presence, type and size, in that order.

        Returns:
            True if the upload is plain text and can be decoded directly

        Raises:
            MissingFileError, UnsupportedTypeError, FileTooLargeError
        """
        if upload is None:
            raise MissingFileError()
        return self.check_declared(upload.filename, upload.content_type, upload.size)

    def check_declared(self, filename: str, content_type: str | None, size: int | None) -> bool:
        """Type and size checks on upload metadata alone.

        Lets the HTTP layer reject an oversized part before reading it into
        memory. An unknown size (None) skips the size check; ``validate``
        repeats it on the actual bytes.
        """
        plain_text = is_plain_text(filename, content_type)
        if normalize_content_type(content_type) not in ALLOWED_TYPES and not plain_text:
            raise UnsupportedTypeError(content_type=content_type)

        if size is not None and size > self.max_file_size:
            raise FileTooLargeError(size=size, limit=self.max_file_size)

        return plain_text

    async def extract(self, upload: UploadedDocument | None) -> ExtractedDocument:
        """Validate one upload and extract its text.

        Raises:
            ValidationError: The upload was rejected before extraction
            EmptyContentError: No text could be found (e.g. scanned PDF)
            ExtractorFailedError: The format extractor raised
        """
        plain_text = self.validate(upload)

        if plain_text:
            text = upload.content.decode("utf-8-sig", errors="replace")
        else:
            content_type = normalize_content_type(upload.content_type)
            try:
                text = await asyncio.to_thread(
                    self.extractor.extract_text, upload.content, content_type
                )
            except Exception as e:
                logger.error(
                    "extraction_failed",
                    filename=upload.filename,
                    content_type=content_type,
                    error=str(e),
                )
                raise ExtractorFailedError(str(e) or type(e).__name__, filename=upload.filename) from e

        if not text or not text.strip():
            raise EmptyContentError(filename=upload.filename)

        logger.info("document_extracted", filename=upload.filename, char_count=len(text))
        return ExtractedDocument(filename=upload.filename, text=text)

    async def extract_many(self, uploads: Sequence[UploadedDocument]) -> BatchResult:
        """Extract a batch concurrently; one failure never cancels the others."""
        return await settle_batch(uploads, self.extract)


async def settle_batch(
    uploads: Sequence[UploadedDocument],
    extract_one: Callable[[UploadedDocument], Awaitable[ExtractedDocument]],
) -> BatchResult:
    """Run ``extract_one`` over every upload at once and partition the outcomes.

    Used for server-side batches and by the HTTP client, so both report
    failures the same way: an ``AppError`` contributes its message, any other
    exception its string form. Cancellation is never swallowed.
    """
    results = await asyncio.gather(
        *(extract_one(upload) for upload in uploads),
        return_exceptions=True,
    )

    batch = BatchResult()
    for upload, result in zip(uploads, results, strict=True):
        filename = upload.filename if upload is not None else "unknown"
        if isinstance(result, ExtractedDocument):
            batch.succeeded.append(result)
        elif isinstance(result, AppError):
            batch.failed.append(FailedUpload(filename=filename, error=result.message))
        elif isinstance(result, Exception):
            logger.error("batch_extraction_error", filename=filename, error=str(result))
            batch.failed.append(FailedUpload(filename=filename, error=str(result) or type(result).__name__))
        else:
            raise result

    logger.info(
        "batch_extracted",
        succeeded=len(batch.succeeded),
        failed=len(batch.failed),
    )
    return batch
