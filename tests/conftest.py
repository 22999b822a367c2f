"""
Pytest configuration and fixtures.

Provides fake processors, mocked HTTP transports and in-memory sample
documents shared by all test modules.
"""

import io
from typing import Callable

import docx
import fitz
import httpx
import pytest
from PIL import Image

from doc_extract.models import Document
from doc_extract.resolver import ContentTypeResolver

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class FakeProcessor:
    """Minimal processor satisfying the DocumentProcessor protocol."""

    def __init__(self, supported_mime_type: str, text: str = "extracted text") -> None:
        self.supported_mime_type = supported_mime_type
        self.text = text
        self.calls: list[Document] = []

    async def process(self, document: Document) -> str:
        self.calls.append(document)
        return self.text


class FailingProcessor:
    """Processor whose own failure must reach the caller untouched."""

    supported_mime_type = "application/pdf"

    async def process(self, document: Document) -> str:
        raise KeyError("parser exploded")


def mock_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """Create an AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def content_type_handler(content_type: str, status_code: int = 200):
    """Handler answering every request with one status and Content-Type."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, headers={"content-type": content_type})

    return handler


# ==============================================================================
# Processor Fixtures
# ==============================================================================


@pytest.fixture
def pdf_processor() -> FakeProcessor:
    return FakeProcessor("application/pdf", text="PDF text")


@pytest.fixture
def failing_processor() -> FailingProcessor:
    return FailingProcessor()


# ==============================================================================
# Resolver Fixtures
# ==============================================================================


@pytest.fixture
def pdf_resolver() -> ContentTypeResolver:
    """Resolver whose probe reports application/pdf."""
    return ContentTypeResolver(
        client=mock_http_client(content_type_handler("application/pdf; charset=binary"))
    )


@pytest.fixture
def gif_resolver() -> ContentTypeResolver:
    """Resolver whose probe reports image/gif."""
    return ContentTypeResolver(client=mock_http_client(content_type_handler("image/gif")))


# ==============================================================================
# Sample Document Fixtures
# ==============================================================================


@pytest.fixture
def pdf_bytes() -> bytes:
    """A one-page PDF with a line of native text."""
    pdf_document = fitz.open()
    page = pdf_document.new_page()
    page.insert_text((72, 72), "Quarterly revenue report", fontsize=12)
    data = pdf_document.tobytes()
    pdf_document.close()
    return data


@pytest.fixture
def docx_bytes() -> bytes:
    """A .docx with two paragraphs and a 2x2 table."""
    document = docx.Document()
    document.add_paragraph("Employment contract")
    document.add_paragraph("   ")
    document.add_paragraph("Signed by both parties")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Name"
    table.cell(0, 1).text = "Role"
    table.cell(1, 0).text = "Ada"
    table.cell(1, 1).text = "Engineer"

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """A small RGB PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
