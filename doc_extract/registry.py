"""Processor registry keyed by exact MIME type."""

from typing import Optional

from doc_extract.interface import DocumentProcessor
from doc_extract.logger import get_logger

logger = get_logger(__name__)


class ProcessorRegistry:
    """Maps each MIME type to the one processor that handles it.

    Registering a processor for a type that already has one replaces it.
    Lookups are exact: no wildcard or ``image/*`` style matching.
    """

    def __init__(self) -> None:
        self._processors: dict[str, DocumentProcessor] = {}

    def register(self, processor: DocumentProcessor) -> None:
        mime_type = processor.supported_mime_type
        replaced = self._processors.get(mime_type)
        self._processors[mime_type] = processor

        logger.debug(
            "Registered document processor",
            extra_data={
                "mime_type": mime_type,
                "processor": type(processor).__name__,
                "replaced": type(replaced).__name__ if replaced is not None else None,
            },
        )

    def get(self, mime_type: str) -> Optional[DocumentProcessor]:
        return self._processors.get(mime_type)

    def supports(self, mime_type: str) -> bool:
        return mime_type in self._processors

    def supported_mime_types(self) -> list[str]:
        """Registered types in registration order."""
        return list(self._processors)

    def __contains__(self, mime_type: object) -> bool:
        return mime_type in self._processors

    def __len__(self) -> int:
        return len(self._processors)
