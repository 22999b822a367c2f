"""Bundled document processors.

- PDF (PyMuPDF4LLM, Tesseract OCR fallback)
- Word .docx (python-docx)
- Word .doc and OpenDocument .odt (textutil / LibreOffice)
- Images (Tesseract OCR)
"""

from typing import Optional

import httpx

from doc_extract.config import OCRConfig
from doc_extract.processors.base import BaseProcessor
from doc_extract.processors.image import ImageProcessor
from doc_extract.processors.pdf import PdfProcessor
from doc_extract.processors.word import (
    MSWORD_MIME_TYPE,
    ODT_MIME_TYPE,
    DocxProcessor,
    OfficeProcessor,
)


def default_processors(
    config: Optional[OCRConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> list[BaseProcessor]:
    """One processor for each default allowed document and image type."""
    return [
        PdfProcessor(config, http_client),
        OfficeProcessor(MSWORD_MIME_TYPE, config, http_client),
        DocxProcessor(config, http_client),
        OfficeProcessor(ODT_MIME_TYPE, config, http_client),
        *ImageProcessor.for_all_types(config, http_client),
    ]


__all__ = [
    "BaseProcessor",
    "DocxProcessor",
    "ImageProcessor",
    "OfficeProcessor",
    "PdfProcessor",
    "default_processors",
]
