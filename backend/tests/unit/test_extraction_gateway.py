"""Tests for upload validation and extraction."""

import pytest

from exam_prep.core.exceptions import (
    EmptyContentError,
    ExtractorFailedError,
    FileTooLargeError,
    MissingFileError,
    UnsupportedTypeError,
)
from exam_prep.documents.extractors import DOCX_MIME, PDF_MIME, PPTX_MIME
from exam_prep.documents.gateway import ExtractionGateway, normalize_content_type, settle_batch
from exam_prep.documents.models import ExtractedDocument, FailedUpload, UploadedDocument


class TestValidation:
    """Test cases for the presence, type and size checks."""

    @pytest.mark.asyncio
    async def test_missing_file(self, gateway):
        """Test that no upload is a missing-file error."""
        with pytest.raises(MissingFileError) as exc_info:
            await gateway.extract(None)
        assert exc_info.value.message == "No file provided"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_unsupported_type_skips_extractor(self, gateway, fake_extractor):
        """Test that an unsupported type never reaches the extractor."""
        upload = UploadedDocument(filename="photo.png", content=b"\x89PNG", content_type="image/png")

        with pytest.raises(UnsupportedTypeError) as exc_info:
            await gateway.extract(upload)

        assert "PDF, PPTX, DOCX, or TXT" in exc_info.value.message
        assert fake_extractor.calls == []

    @pytest.mark.asyncio
    async def test_type_checked_before_size(self, gateway):
        """Test that an oversized unsupported file reports its type."""
        upload = UploadedDocument(filename="big.zip", content=b"x" * 4096, content_type="application/zip")

        with pytest.raises(UnsupportedTypeError):
            await gateway.extract(upload)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("filename", "content_type"),
        [
            ("notes.txt", "text/plain"),
            ("lecture.pdf", PDF_MIME),
            ("slides.pptx", PPTX_MIME),
            ("essay.docx", DOCX_MIME),
        ],
    )
    async def test_oversized_file_rejected_for_every_type(self, gateway, filename, content_type):
        """Test that the ceiling applies to every supported type."""
        upload = UploadedDocument(filename=filename, content=b"a" * 1025, content_type=content_type)

        with pytest.raises(FileTooLargeError) as exc_info:
            await gateway.extract(upload)

        assert exc_info.value.size == 1025
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_file_at_ceiling_is_accepted(self, gateway):
        """Test that a file exactly at the ceiling passes."""
        upload = UploadedDocument(filename="notes.txt", content=b"a" * 1024, content_type="text/plain")

        document = await gateway.extract(upload)

        assert document.char_count == 1024

    def test_default_ceiling_is_20_mib(self, fake_extractor):
        """Test the default size ceiling."""
        gateway = ExtractionGateway(extractor=fake_extractor)
        assert gateway.max_file_size == 20 * 1024 * 1024

    def test_too_large_message_uses_megabytes(self):
        """Test that the default limit is quoted in megabytes."""
        error = FileTooLargeError(size=30 * 1024 * 1024, limit=20 * 1024 * 1024)
        assert error.message == "File too large. Maximum size is 20MB."

    def test_normalize_content_type(self):
        """Test that MIME parameters and case are normalized."""
        assert normalize_content_type("Text/Plain; charset=utf-8") == "text/plain"
        assert normalize_content_type(None) == ""


class TestPlainText:
    """Test cases for directly decoded text uploads."""

    @pytest.mark.asyncio
    async def test_hello_world(self, gateway, fake_extractor):
        """Test decoding a simple text file."""
        upload = UploadedDocument(filename="hello.txt", content=b"Hello world", content_type="text/plain")

        document = await gateway.extract(upload)

        assert document.filename == "hello.txt"
        assert document.text == "Hello world"
        assert document.char_count == 11
        assert fake_extractor.calls == []

    @pytest.mark.asyncio
    async def test_txt_extension_with_generic_type(self, gateway):
        """Test that a .txt name is enough to decode as text."""
        upload = UploadedDocument(
            filename="NOTES.TXT", content="Ünïcode notes".encode(), content_type="application/octet-stream"
        )

        document = await gateway.extract(upload)

        assert document.text == "Ünïcode notes"

    @pytest.mark.asyncio
    async def test_text_is_not_trimmed(self, gateway):
        """Test that surrounding whitespace is preserved."""
        upload = UploadedDocument(filename="a.txt", content=b"  padded \n", content_type="text/plain")

        document = await gateway.extract(upload)

        assert document.text == "  padded \n"
        assert document.char_count == 10

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_replaced(self, gateway):
        """Test that undecodable bytes become replacement characters."""
        upload = UploadedDocument(filename="a.txt", content=b"ok \xff", content_type="text/plain")

        document = await gateway.extract(upload)

        assert document.text == "ok �"

    @pytest.mark.asyncio
    async def test_whitespace_only_text(self, gateway):
        """Test that a blank text file reports empty content."""
        upload = UploadedDocument(filename="blank.txt", content=b" \n\t ", content_type="text/plain")

        with pytest.raises(EmptyContentError) as exc_info:
            await gateway.extract(upload)

        assert "empty or scanned" in exc_info.value.message


class TestBinaryExtraction:
    """Test cases for documents routed to the format extractor."""

    @pytest.mark.asyncio
    async def test_pdf_routed_to_extractor(self, gateway, fake_extractor, pdf_upload):
        """Test that PDFs go to the extractor with their MIME type."""
        document = await gateway.extract(pdf_upload)

        assert document.text == "Extracted lecture text"
        assert document.char_count == len("Extracted lecture text")
        assert fake_extractor.calls == [(b"%PDF-1.4 fake", PDF_MIME)]

    @pytest.mark.asyncio
    async def test_content_type_parameters_are_stripped(self, gateway, fake_extractor):
        """Test that the extractor receives the bare MIME type."""
        upload = UploadedDocument(filename="deck.pptx", content=b"PK", content_type=f"{PPTX_MIME}; foo=bar")

        await gateway.extract(upload)

        assert fake_extractor.calls[0][1] == PPTX_MIME

    @pytest.mark.asyncio
    async def test_empty_pdf(self, gateway):
        """Test that a PDF without text reports empty content."""
        upload = UploadedDocument(filename="empty.pdf", content=b"", content_type=PDF_MIME)

        with pytest.raises(EmptyContentError):
            await gateway.extract(upload)

    @pytest.mark.asyncio
    async def test_extractor_failure_keeps_message(self, gateway, fake_extractor, pdf_upload):
        """Test that the extractor's message is kept in the failure."""
        fake_extractor.error = RuntimeError("file is encrypted")

        with pytest.raises(ExtractorFailedError) as exc_info:
            await gateway.extract(pdf_upload)

        assert exc_info.value.message == "Upload failed: file is encrypted"
        assert exc_info.value.status_code == 500
        assert exc_info.value.filename == "lecture1.pdf"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_same_bytes_same_text(self, gateway, pdf_upload):
        """Test that extraction is repeatable."""
        first = await gateway.extract(pdf_upload)
        second = await gateway.extract(pdf_upload)

        assert first == second


class TestBatchExtraction:
    """Test cases for settle-all batch extraction."""

    @pytest.mark.asyncio
    async def test_partition_preserves_order(self, gateway):
        """Test that a batch is partitioned in submission order."""
        uploads = [
            UploadedDocument(filename="a.txt", content=b"alpha", content_type="text/plain"),
            UploadedDocument(filename="b.png", content=b"img", content_type="image/png"),
            UploadedDocument(filename="c.txt", content=b"gamma", content_type="text/plain"),
            UploadedDocument(filename="d.txt", content=b"   ", content_type="text/plain"),
            UploadedDocument(filename="e.txt", content=b"epsilon", content_type="text/plain"),
        ]

        batch = await gateway.extract_many(uploads)

        assert [d.filename for d in batch.succeeded] == ["a.txt", "c.txt", "e.txt"]
        assert batch.failed_filenames == ["b.png", "d.txt"]
        assert "Unsupported file type" in batch.failed[0].error

    @pytest.mark.asyncio
    async def test_extractor_failure_does_not_cancel_others(self, gateway, fake_extractor, pdf_upload):
        """Test that one failure leaves the rest of the batch intact."""
        fake_extractor.error = ValueError("corrupt")
        uploads = [
            pdf_upload,
            UploadedDocument(filename="notes.txt", content=b"still here", content_type="text/plain"),
        ]

        batch = await gateway.extract_many(uploads)

        assert [d.text for d in batch.succeeded] == ["still here"]
        assert batch.failed[0].filename == "lecture1.pdf"
        assert batch.failed[0].error == "Upload failed: corrupt"

    @pytest.mark.asyncio
    async def test_empty_batch(self, gateway):
        """Test that an empty batch has no results."""
        batch = await gateway.extract_many([])

        assert batch.succeeded == []
        assert batch.failed == []

    @pytest.mark.asyncio
    async def test_settle_batch_reports_plain_exceptions(self):
        """Test that a non-application error is reported by its message."""

        async def extract_one(upload):
            if upload.filename == "bad.txt":
                raise ConnectionError("connection reset")
            return ExtractedDocument(filename=upload.filename, text="ok")

        uploads = [
            UploadedDocument(filename="good.txt", content=b"x", content_type="text/plain"),
            UploadedDocument(filename="bad.txt", content=b"y", content_type="text/plain"),
        ]

        batch = await settle_batch(uploads, extract_one)

        assert [d.filename for d in batch.succeeded] == ["good.txt"]
        assert batch.failed == [FailedUpload(filename="bad.txt", error="connection reset")]


class TestDeclaredChecks:
    """Test cases for checks made on upload metadata before the body is read."""

    def test_declared_size_over_limit_rejected(self, gateway):
        """Test that an oversized declared size fails without any content."""
        with pytest.raises(FileTooLargeError):
            gateway.check_declared("notes.txt", "text/plain", 2048)

    def test_type_checked_before_declared_size(self, gateway):
        """Test that an unsupported type wins over an oversized declared size."""
        with pytest.raises(UnsupportedTypeError):
            gateway.check_declared("photo.png", "image/png", 2048)

    def test_unknown_size_skips_size_check(self, gateway):
        """Test that a part without a declared size is left for the byte check."""
        assert gateway.check_declared("slides.pdf", PDF_MIME, None) is False

    def test_txt_extension_is_plain_text(self, gateway):
        """Test that a .txt name counts as plain text whatever the declared type."""
        assert gateway.check_declared("notes.TXT", "application/octet-stream", 10) is True
