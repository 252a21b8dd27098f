"""Document processing: upload validation, text extraction and context merging.

Supported formats are PDF, PPTX, DOCX and plain text.
"""

from .context import DocumentContext, clear_context, format_document, merge_context
from .gateway import ExtractionGateway
from .models import BatchResult, ExtractedDocument, FailedUpload, UploadedDocument

__all__ = [
    "BatchResult",
    "DocumentContext",
    "ExtractedDocument",
    "ExtractionGateway",
    "FailedUpload",
    "UploadedDocument",
    "clear_context",
    "format_document",
    "merge_context",
]
