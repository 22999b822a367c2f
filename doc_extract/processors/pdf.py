"""PDF processor: PyMuPDF4LLM markdown with Tesseract OCR fallback."""

import io
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

import fitz  # PyMuPDF
import httpx
import pymupdf4llm
import pytesseract
from PIL import Image

from doc_extract.config import OCRConfig
from doc_extract.logger import Timer, get_logger
from doc_extract.processors.base import BaseProcessor

logger = get_logger(__name__)


class PdfProcessor(BaseProcessor):
    """Extracts PDF text as markdown, OCRing pages of scanned PDFs.

    Native extraction goes through PyMuPDF4LLM. When the native text looks
    too thin for the page count or file size (see ``OCRConfig``), pages are
    rendered and OCRed in parallel and the longer result wins.
    """

    supported_mime_type = "application/pdf"
    kind = "PDF"

    def __init__(
        self,
        config: Optional[OCRConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(config, http_client)

        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd
        if self.config.tessdata_prefix:
            os.environ["TESSDATA_PREFIX"] = self.config.tessdata_prefix

    def _extract(self, file_bytes: bytes, file_name: str) -> str:
        with fitz.open(stream=file_bytes, filetype="pdf") as pdf_document:
            page_count = pdf_document.page_count

            with Timer("pdf_native_extraction") as native_timer:
                md_text = pymupdf4llm.to_markdown(
                    pdf_document,
                    table_strategy=self.config.table_strategy,
                    force_text=self.config.force_text,
                    write_images=False,
                    ignore_images=True,
                    ignore_code=False,
                    fontsize_limit=self.config.fontsize_limit,
                )

        text = md_text.strip()
        char_count = len(text)

        logger.debug(
            "PDF native text extraction completed",
            extra_data={
                "file_name": file_name,
                "characters_extracted": char_count,
                "page_count": page_count,
                "extraction_time_ms": native_timer.get_elapsed_ms(),
            },
        )

        if not self.should_ocr(char_count, page_count, len(file_bytes)):
            return text

        logger.info(
            "Triggering OCR fallback for PDF",
            extra_data={
                "file_name": file_name,
                "native_characters": char_count,
                "page_count": page_count,
            },
        )

        with Timer("pdf_ocr") as ocr_timer:
            ocr_text = self._ocr_pdf(file_bytes, page_count, file_name)

        logger.info(
            "OCR extraction completed",
            extra_data={
                "file_name": file_name,
                "characters_extracted": len(ocr_text),
                "ocr_time_ms": ocr_timer.get_elapsed_ms(),
            },
        )

        # Prefer OCR output only if it recovered more text
        return ocr_text if len(ocr_text) > char_count else text

    def should_ocr(self, native_char_count: int, page_count: int, file_size_bytes: int) -> bool:
        """Decide whether to run OCR after native extraction."""
        if native_char_count == 0:
            return True

        # Very little text per page likely means a scanned PDF
        if page_count > 0 and (
            native_char_count / page_count
        ) < self.config.pdf_ocr_min_chars_per_page:
            return True

        return (
            native_char_count < self.config.pdf_ocr_min_chars
            and file_size_bytes >= self.config.pdf_ocr_min_file_size_bytes
        )

    def _ocr_pdf(self, file_bytes: bytes, page_count: int, file_name: str) -> str:
        """OCR every page in parallel and join them in page order."""
        page_results: dict[int, str] = {}
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_page = {
                executor.submit(self._ocr_page, file_bytes, page_num, file_name): page_num
                for page_num in range(page_count)
            }
            for future in as_completed(future_to_page):
                page_num, page_text = future.result()
                page_results[page_num] = page_text

        all_text = [page_results[i] for i in range(page_count) if page_results.get(i)]

        logger.info(
            "PDF OCR completed for all pages",
            extra_data={
                "file_name": file_name,
                "page_count": page_count,
                "pages_with_text": len(all_text),
            },
        )
        return "\n\n".join(all_text)

    def _ocr_page(self, file_bytes: bytes, page_num: int, file_name: str) -> tuple[int, str]:
        """OCR a single page; a failed page contributes no text."""
        start_time = time.perf_counter()

        # Each worker opens its own handle, fitz documents are not thread-safe
        try:
            with fitz.open(stream=file_bytes, filetype="pdf") as pdf_document:
                pix = pdf_document[page_num].get_pixmap(dpi=self.config.dpi)
                image = Image.open(io.BytesIO(pix.tobytes("png")))

            page_text = pytesseract.image_to_string(
                image,
                lang=self.config.languages,
                config=self.config.tesseract_config,
            ).strip()
        except Exception as exc:
            logger.error(
                f"OCR failed for page {page_num + 1}",
                extra_data={
                    "file_name": file_name,
                    "page_number": page_num + 1,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
                exc_info=True,
            )
            return page_num, ""

        logger.debug(
            f"OCR completed for page {page_num + 1}",
            extra_data={
                "file_name": file_name,
                "page_number": page_num + 1,
                "characters_extracted": len(page_text),
                "ocr_time_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        return page_num, page_text
