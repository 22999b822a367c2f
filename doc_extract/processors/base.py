"""Shared helpers for the bundled processors."""

import asyncio
from abc import ABC, abstractmethod
from functools import partial
from typing import Optional

import httpx

from doc_extract.config import OCRConfig
from doc_extract.exceptions import ProcessingFailedError
from doc_extract.logger import Timer, get_logger
from doc_extract.models import Document

logger = get_logger(__name__)


class BaseProcessor(ABC):
    """Base class for the bundled processors.

    Subclasses implement ``_extract`` as a blocking function over raw bytes;
    this class loads the bytes (downloading URL-only documents), runs the
    extraction in a worker thread and turns failures into
    ``ProcessingFailedError``.
    """

    supported_mime_type: str = ""
    kind: str = "document"

    def __init__(
        self,
        config: Optional[OCRConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize processor.

        Args:
            config: OCR and parsing configuration. If None, uses defaults.
            http_client: Client used to download URL-only documents. If None,
                a short-lived client is opened per download.
        """
        self.config = config or OCRConfig()
        self.http_client = http_client

    async def process(self, document: Document) -> str:
        file_bytes = await self._load_contents(document)
        file_name = document.filename or "unknown"

        loop = asyncio.get_running_loop()
        try:
            with Timer(f"{self.kind}_extraction") as timer:
                text = await loop.run_in_executor(
                    None, partial(self._extract, file_bytes, file_name)
                )
        except ProcessingFailedError:
            raise
        except Exception as exc:
            logger.error(
                "Document extraction failed",
                extra_data={
                    "file_name": file_name,
                    "mime_type": self.supported_mime_type,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
                exc_info=True,
            )
            raise ProcessingFailedError(
                self.supported_mime_type, f"Failed to extract text from {self.kind}: {exc}"
            ) from exc

        if not text:
            logger.warning(
                "No text content extracted from document",
                extra_data={
                    "file_name": file_name,
                    "mime_type": self.supported_mime_type,
                    "file_size_bytes": len(file_bytes),
                },
            )
            raise ProcessingFailedError(
                self.supported_mime_type, f"Unable to extract text content from the provided {self.kind}"
            )

        logger.info(
            "Successfully extracted text from document",
            extra_data={
                "file_name": file_name,
                "mime_type": self.supported_mime_type,
                "character_count": len(text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    @abstractmethod
    def _extract(self, file_bytes: bytes, file_name: str) -> str:
        """Extract text from raw bytes. Runs in a worker thread."""
        ...

    async def _load_contents(self, document: Document) -> bytes:
        if document.contents is not None:
            return bytes(document.contents)
        if not document.url:
            raise ProcessingFailedError(
                self.supported_mime_type, f"Cannot process {self.kind} without contents or a url"
            )

        try:
            with Timer("document_download") as timer:
                if self.http_client is not None:
                    response = await self.http_client.get(document.url, follow_redirects=True)
                else:
                    async with httpx.AsyncClient(
                        timeout=self.config.fetch_timeout, follow_redirects=True
                    ) as client:
                        response = await client.get(document.url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Failed to download document",
                extra_data={
                    "url": document.url,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise ProcessingFailedError(
                self.supported_mime_type, f"Failed to download {self.kind}: {exc}"
            ) from exc

        logger.debug(
            "Downloaded document contents",
            extra_data={
                "url": document.url,
                "file_size_bytes": len(response.content),
                "download_time_ms": timer.get_elapsed_ms(),
            },
        )
        return response.content
