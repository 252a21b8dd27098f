"""Text extraction for binary office formats (PDF, DOCX, PPTX)."""

from __future__ import annotations

import io

from exam_prep.core.logging import get_logger

logger = get_logger(__name__)

PDF_MIME = "application/pdf"
PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"


class OfficeTextExtractor:
    """Extracts the text layer of PDF, Word and PowerPoint documents from bytes."""

    SUPPORTED_TYPES = {PDF_MIME, PPTX_MIME, DOCX_MIME}

    def extract_text(self, content: bytes, type_hint: str) -> str:
        """Extract text from a document.

        Args:
            content: Raw file bytes
            type_hint: MIME type of the file

        Returns:
            Extracted text ("" for an empty document)

        Raises:
            ValueError: If type_hint is not supported.
        """
        type_hint = type_hint.lower()
        if type_hint not in self.SUPPORTED_TYPES:
            raise ValueError(f"Unsupported file type: {type_hint}")

        if not content:
            return ""

        if type_hint == PDF_MIME:
            return self._extract_pdf(content)
        elif type_hint == DOCX_MIME:
            return self._extract_docx(content)
        else:
            return self._extract_pptx(content)

    def _extract_pdf(self, content: bytes) -> str:
        """Extract PDF text page by page using pdfplumber."""
        import pdfplumber

        pages = []
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            for page in pdf.pages:
                text = page.extract_text()
                if text and text.strip():
                    pages.append(text.strip())
        logger.debug("pdf_extracted", pages=len(pages))
        return "\n\n".join(pages)

    def _extract_docx(self, content: bytes) -> str:
        """Extract paragraphs and tables using python-docx."""
        from docx import Document as DocxDocument

        doc = DocxDocument(io.BytesIO(content))
        parts = [p.text.strip() for p in doc.paragraphs if p.text.strip()]

        for table in doc.tables:
            rows = []
            for row in table.rows:
                rows.append(" | ".join(cell.text.strip() for cell in row.cells))
            if rows:
                parts.append("\n".join(rows))

        return "\n\n".join(parts)

    def _extract_pptx(self, content: bytes) -> str:
        """Extract slide text (text frames and tables) using python-pptx."""
        from pptx import Presentation

        prs = Presentation(io.BytesIO(content))
        slides = []
        for slide in prs.slides:
            lines = []
            for shape in slide.shapes:
                if shape.has_text_frame:
                    text = shape.text_frame.text.strip()
                    if text:
                        lines.append(text)
                elif getattr(shape, "has_table", False):
                    for row in shape.table.rows:
                        lines.append(" | ".join(cell.text.strip() for cell in row.cells))
            if lines:
                slides.append("\n".join(lines))
        logger.debug("pptx_extracted", slides=len(slides))
        return "\n\n".join(slides)
