"""Common test fixtures."""

import pytest
from fastapi.testclient import TestClient

from exam_prep.core.config import AppConfig, LLMConfig, UploadConfig
from exam_prep.core.di_container import container as di_container
from exam_prep.documents.extractors import PDF_MIME
from exam_prep.documents.gateway import ExtractionGateway
from exam_prep.documents.models import UploadedDocument


class MockLLM:
    """Mock completion backend for testing."""

    provider_name = "MockLLM"

    def __init__(self, reply: str | None = "This is a mock response.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list[dict[str, str]]] = []

    async def generate(self, messages, **kwargs) -> str | None:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeExtractor:
    """Stand-in for the office format extractor."""

    def __init__(self, text: str = "Extracted lecture text", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    def extract_text(self, content: bytes, type_hint: str) -> str:
        self.calls.append((content, type_hint))
        if self.error is not None:
            raise self.error
        # An empty document has no text layer
        if not content:
            return ""
        return self.text


@pytest.fixture(autouse=True)
def isolate_llm_env(monkeypatch):
    """Keep a developer's real API key out of the tests."""
    for name in ("OPENAI_API_KEY", "LLM_OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def test_config() -> AppConfig:
    """Create test configuration."""
    return AppConfig(
        debug=True,
        log_level="DEBUG",
        llm=LLMConfig(provider="openai", model="gpt-4o-mini", openai_api_key="test-key"),
        upload=UploadConfig(max_file_size_bytes=1024),
    )


@pytest.fixture
def mock_llm() -> MockLLM:
    """Create mock LLM provider."""
    return MockLLM()


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    """Create fake text extractor."""
    return FakeExtractor()


@pytest.fixture
def gateway(fake_extractor: FakeExtractor) -> ExtractionGateway:
    """Gateway with a small size ceiling and a fake extractor."""
    return ExtractionGateway(extractor=fake_extractor, max_file_size=1024)


@pytest.fixture
def pdf_upload() -> UploadedDocument:
    return UploadedDocument(filename="lecture1.pdf", content=b"%PDF-1.4 fake", content_type=PDF_MIME)


@pytest.fixture
def override_llm(mock_llm):
    """Override LLM provider in DI container."""
    with di_container.llm.override(mock_llm):
        yield mock_llm


@pytest.fixture
def override_extractor(fake_extractor):
    """Override text extractor in DI container."""
    with di_container.text_extractor.override(fake_extractor):
        yield fake_extractor


@pytest.fixture
def app(test_config, override_llm, override_extractor):
    """Application with config, completion backend and extractor replaced."""
    from exam_prep.main import create_app

    with di_container.config.override(test_config):
        yield create_app()


@pytest.fixture
def client(app):
    """Create test client."""
    with TestClient(app) as client:
        yield client
