"""
Unit tests for the bundled processors.

PDF and DOCX samples are generated in memory; Tesseract and the office
converters are patched so the tests need no system binaries.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from PIL import Image

from conftest import DOCX_MIME_TYPE, mock_http_client
from doc_extract import DocExtract, Document
from doc_extract.config import DEFAULT_ALLOWED_DOCUMENTS, DEFAULT_ALLOWED_IMAGES, OCRConfig
from doc_extract.exceptions import ProcessingFailedError
from doc_extract.processors import (
    DocxProcessor,
    ImageProcessor,
    OfficeProcessor,
    PdfProcessor,
    default_processors,
)

NO_OCR = OCRConfig(pdf_ocr_min_chars_per_page=0)


class TestPdfProcessor:
    """Tests for PdfProcessor."""

    @pytest.mark.asyncio
    async def test_extract_native_text(self, pdf_bytes: bytes) -> None:
        processor = PdfProcessor(NO_OCR)

        text = await processor.process(
            Document(filename="report.pdf", type="application/pdf", contents=pdf_bytes)
        )

        assert "Quarterly revenue report" in text

    @pytest.mark.asyncio
    async def test_ocr_fallback_for_scanned_pdf(self, pdf_bytes: bytes) -> None:
        processor = PdfProcessor()

        with patch("doc_extract.processors.pdf.pymupdf4llm.to_markdown", return_value="  "), patch(
            "doc_extract.processors.pdf.pytesseract.image_to_string",
            return_value="Scanned page text\n",
        ) as mock_ocr:
            text = await processor.process(Document(type="application/pdf", contents=pdf_bytes))

        assert text == "Scanned page text"
        assert mock_ocr.call_count == 1
        assert mock_ocr.call_args.kwargs["config"] == "--psm 6 --oem 1"

    @pytest.mark.asyncio
    async def test_ocr_failure_keeps_native_text(self, pdf_bytes: bytes) -> None:
        processor = PdfProcessor()

        with patch(
            "doc_extract.processors.pdf.pytesseract.image_to_string",
            side_effect=RuntimeError("tesseract is not installed"),
        ):
            text = await processor.process(Document(type="application/pdf", contents=pdf_bytes))

        assert "Quarterly revenue report" in text

    @pytest.mark.asyncio
    async def test_invalid_pdf(self) -> None:
        processor = PdfProcessor()

        with pytest.raises(ProcessingFailedError, match="Failed to extract text from PDF") as exc_info:
            await processor.process(Document(type="application/pdf", contents=b"This is not a PDF"))

        assert exc_info.value.mime_type == "application/pdf"

    @pytest.mark.parametrize(
        "chars,pages,size,expected",
        [
            (0, 3, 1_000, True),
            (100, 2, 1_000, True),
            (1_000, 2, 1_000, False),
            (400, 1, 300_000, True),
            (400, 1, 10_000, False),
        ],
    )
    def test_should_ocr(self, chars: int, pages: int, size: int, expected: bool) -> None:
        assert PdfProcessor().should_ocr(chars, pages, size) is expected


class TestDocxProcessor:
    """Tests for DocxProcessor."""

    @pytest.mark.asyncio
    async def test_extract_paragraphs_and_tables(self, docx_bytes: bytes) -> None:
        processor = DocxProcessor()

        text = await processor.process(
            Document(filename="contract.docx", type=DOCX_MIME_TYPE, contents=docx_bytes)
        )

        assert text == (
            "Employment contract\n\n"
            "Signed by both parties\n\n"
            "Name | Role\n--- | ---\nAda | Engineer"
        )

    @pytest.mark.asyncio
    async def test_invalid_docx(self) -> None:
        with pytest.raises(ProcessingFailedError, match="DOCX"):
            await DocxProcessor().process(Document(type=DOCX_MIME_TYPE, contents=b"not a docx"))

    @pytest.mark.asyncio
    async def test_downloads_url_only_document(self, docx_bytes: bytes) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=docx_bytes)

        processor = DocxProcessor(http_client=mock_http_client(handler))

        text = await processor.process(
            Document(type=DOCX_MIME_TYPE, url="https://example.com/contract.docx")
        )

        assert "Employment contract" in text
        assert [r.method for r in requests] == ["GET"]

    @pytest.mark.asyncio
    async def test_download_failure(self) -> None:
        processor = DocxProcessor(
            http_client=mock_http_client(lambda request: httpx.Response(404))
        )

        with pytest.raises(ProcessingFailedError, match="Failed to download DOCX"):
            await processor.process(
                Document(type=DOCX_MIME_TYPE, url="https://example.com/missing.docx")
            )

    @pytest.mark.asyncio
    async def test_document_without_source(self) -> None:
        with pytest.raises(ProcessingFailedError, match="without contents or a url"):
            await DocxProcessor().process(Document(type=DOCX_MIME_TYPE))


class TestImageProcessor:
    """Tests for ImageProcessor."""

    @pytest.mark.asyncio
    async def test_ocr_image(self, png_bytes: bytes) -> None:
        processor = ImageProcessor("image/png", OCRConfig(languages="eng+fra"))

        with patch(
            "doc_extract.processors.image.pytesseract.image_to_string",
            return_value="  Invoice 2024-001  \n",
        ) as mock_ocr:
            text = await processor.process(
                Document(filename="scan.png", type="image/png", contents=png_bytes)
            )

        assert text == "Invoice 2024-001"
        image = mock_ocr.call_args.args[0]
        assert image.mode == "L"
        assert mock_ocr.call_args.kwargs["lang"] == "eng+fra"

    @pytest.mark.asyncio
    async def test_preprocessing_disabled(self, png_bytes: bytes) -> None:
        processor = ImageProcessor("image/png", OCRConfig(enable_image_preprocessing=False))

        with patch(
            "doc_extract.processors.image.pytesseract.image_to_string", return_value="text"
        ) as mock_ocr:
            await processor.process(Document(type="image/png", contents=png_bytes))

        assert mock_ocr.call_args.args[0].mode == "RGB"

    @pytest.mark.asyncio
    async def test_empty_ocr_result(self, png_bytes: bytes) -> None:
        processor = ImageProcessor("image/png")

        with patch("doc_extract.processors.image.pytesseract.image_to_string", return_value=" \n"):
            with pytest.raises(ProcessingFailedError, match="Unable to extract text content"):
                await processor.process(Document(type="image/png", contents=png_bytes))

    @pytest.mark.asyncio
    async def test_invalid_image(self) -> None:
        with pytest.raises(ProcessingFailedError, match="Failed to extract text from image"):
            await ImageProcessor().process(Document(type="image/jpeg", contents=b"not an image"))

    def test_preprocess(self) -> None:
        image = ImageProcessor().preprocess(Image.new("RGB", (4, 4), color=(10, 200, 30)))

        assert image.mode == "L"

    def test_one_instance_per_type(self) -> None:
        processors = ImageProcessor.for_all_types()

        assert [p.supported_mime_type for p in processors] == list(DEFAULT_ALLOWED_IMAGES)

    def test_unsupported_type(self) -> None:
        with pytest.raises(ValueError, match="image/gif"):
            ImageProcessor("image/gif")


class TestOfficeProcessor:
    """Tests for OfficeProcessor."""

    @pytest.mark.asyncio
    async def test_textutil_conversion(self) -> None:
        processor = OfficeProcessor("application/msword")
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="Legacy memo\n", stderr="")

        with patch(
            "doc_extract.processors.word.shutil.which",
            side_effect=lambda name: "/usr/bin/textutil" if name == "textutil" else None,
        ), patch("doc_extract.processors.word.subprocess.run", return_value=completed) as mock_run:
            text = await processor.process(
                Document(filename="memo.doc", type="application/msword", contents=b"\xd0\xcf\x11\xe0")
            )

        assert text == "Legacy memo"
        command = mock_run.call_args.args[0]
        assert command[:3] == ["textutil", "-convert", "txt"]
        assert command[3].endswith(".doc")
        assert mock_run.call_args.kwargs["timeout"] == 120.0

    @pytest.mark.asyncio
    async def test_soffice_conversion(self) -> None:
        processor = OfficeProcessor("application/vnd.oasis.opendocument.text")

        def fake_run(command, **kwargs):
            out_dir = command[command.index("--outdir") + 1]
            Path(out_dir).mkdir(parents=True, exist_ok=True)
            (Path(out_dir) / "source.txt").write_text("Open document body\n", encoding="utf-8")
            return subprocess.CompletedProcess(args=command, returncode=0, stdout="", stderr="")

        with patch(
            "doc_extract.processors.word.shutil.which",
            side_effect=lambda name: "/usr/bin/soffice" if name == "soffice" else None,
        ), patch("doc_extract.processors.word.subprocess.run", side_effect=fake_run):
            text = await processor.process(
                Document(type="application/vnd.oasis.opendocument.text", contents=b"PK\x03\x04")
            )

        assert text == "Open document body"

    @pytest.mark.asyncio
    async def test_hung_converter_times_out(self) -> None:
        processor = OfficeProcessor(
            "application/vnd.oasis.opendocument.text", OCRConfig(converter_timeout=5)
        )

        with patch(
            "doc_extract.processors.word.shutil.which",
            side_effect=lambda name: "/usr/bin/soffice" if name == "soffice" else None,
        ), patch(
            "doc_extract.processors.word.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="soffice", timeout=5),
        ) as mock_run:
            with pytest.raises(ProcessingFailedError, match="timed out"):
                await processor.process(
                    Document(type="application/vnd.oasis.opendocument.text", contents=b"PK")
                )

        assert mock_run.call_args.kwargs["timeout"] == 5

    @pytest.mark.asyncio
    async def test_no_converter(self) -> None:
        with patch("doc_extract.processors.word.shutil.which", return_value=None):
            with pytest.raises(ProcessingFailedError, match="No converter available"):
                await OfficeProcessor().process(Document(type="application/msword", contents=b"doc"))

    def test_unsupported_type(self) -> None:
        with pytest.raises(ValueError):
            OfficeProcessor(DOCX_MIME_TYPE)


class TestDefaultProcessors:
    """Tests for the default processor set."""

    def test_covers_every_default_type(self) -> None:
        types = [p.supported_mime_type for p in default_processors()]

        assert types == list(DEFAULT_ALLOWED_DOCUMENTS + DEFAULT_ALLOWED_IMAGES)

    @pytest.mark.asyncio
    async def test_client_dispatch(self, docx_bytes: bytes) -> None:
        client = DocExtract.with_processors(*default_processors())

        text = await client.extract(Document(type=DOCX_MIME_TYPE, contents=docx_bytes))

        assert text.startswith("Employment contract")
        assert client.get_supported_mime_types() == list(
            DEFAULT_ALLOWED_DOCUMENTS + DEFAULT_ALLOWED_IMAGES
        )
