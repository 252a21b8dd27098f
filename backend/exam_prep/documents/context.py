"""Document context: extracted texts merged into one delimited string.

Each document renders as a bold filename heading followed by its text, and
documents are separated by a horizontal rule::

    **notes.pdf**

    <text>

    ---

    **slides.pptx**

    <text>

Merging only ever appends; the context is never truncated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from exam_prep.documents.models import ExtractedDocument

SECTION_SEPARATOR = "\n\n---\n\n"
EMPTY_CONTEXT = ""


def format_document(document: ExtractedDocument) -> str:
    return f"**{document.filename}**\n\n{document.text}"


def merge_context(existing: str, documents: Sequence[ExtractedDocument]) -> str:
    """Append documents to an existing context, preserving their order."""
    if not documents:
        return existing

    new_context = SECTION_SEPARATOR.join(format_document(doc) for doc in documents)
    if existing:
        return f"{existing}{SECTION_SEPARATOR}{new_context}"
    return new_context


def clear_context() -> str:
    return EMPTY_CONTEXT


@dataclass(frozen=True)
class DocumentContext:
    """Caller-held context together with the names of the files merged into it."""

    text: str = EMPTY_CONTEXT
    filenames: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.text

    def merge(self, documents: Sequence[ExtractedDocument]) -> DocumentContext:
        return DocumentContext(
            text=merge_context(self.text, documents),
            filenames=self.filenames + tuple(doc.filename for doc in documents),
        )

    def clear(self) -> DocumentContext:
        return DocumentContext(text=clear_context())
