"""Protocol interfaces for dependency injection."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LLMProvider(Protocol):
    """Chat completion interface."""

    provider_name: str

    async def generate(
        self,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> str | None:
        """Generate a single, complete response.

        Returns None (or an empty string) when the backend answered without content.
        """
        ...


@runtime_checkable
class TextExtractor(Protocol):
    """Format-aware text extraction interface."""

    def extract_text(self, content: bytes, type_hint: str) -> str:
        """Extract plain text from a binary document.

        Args:
            content: Raw file bytes
            type_hint: Declared MIME type of the file

        Returns:
            Extracted text, possibly empty when the document has no text layer

        Raises:
            Exception: Any failure of the underlying parsing library
        """
        ...
