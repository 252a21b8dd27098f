"""Document models for uploaded study material."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UploadedDocument:
    """A submitted file, kept only until its text has been extracted."""

    filename: str
    content: bytes = field(repr=False)
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractedDocument:
    """Text extracted from one uploaded file."""

    filename: str
    text: str = field(repr=False)

    @property
    def char_count(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class FailedUpload:
    """An upload that was rejected or could not be extracted."""

    filename: str
    error: str


@dataclass
class BatchResult:
    """Outcome of a batch upload, partitioned by result in submission order."""

    succeeded: list[ExtractedDocument] = field(default_factory=list)
    failed: list[FailedUpload] = field(default_factory=list)

    @property
    def failed_filenames(self) -> list[str]:
        return [f.filename for f in self.failed]
