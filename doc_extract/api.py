"""High-level synchronous API for document extraction."""

import asyncio
from typing import Iterable, Optional

from doc_extract.client import DocExtract
from doc_extract.config import ClientOptions, ExtractionMode
from doc_extract.interface import DocumentProcessor
from doc_extract.models import Document


def extract_document(
    document: Document,
    options: Optional[ClientOptions] = None,
    processors: Optional[Iterable[DocumentProcessor]] = None,
) -> str:
    """Extract text from a document without managing an event loop.

    Convenience wrapper that builds a one-off client and runs
    ``DocExtract.extract``. Must not be called from a running event loop;
    async callers should use ``DocExtract`` directly.

    Args:
        document: Document to extract
        options: Client options (optional). Defaults to processor mode.
        processors: Processors to register (optional). Defaults to the
            bundled processors when the client runs in processor mode.

    Returns:
        Extracted text, or "Document extracted" for allowlist-mode options

    Raises:
        DocExtractError: Any validation, resolution or dispatch failure
        ProcessingFailedError: If a bundled processor fails

    Examples:
        >>> result = extract_document(Document(url="https://example.com/report.pdf"))

        >>> with open("scan.png", "rb") as f:
        ...     result = extract_document(
        ...         Document(filename="scan.png", type="image/png", contents=f.read()),
        ...         processors=[ImageProcessor("image/png", OCRConfig(languages="eng+fra"))],
        ...     )
    """
    options = options or ClientOptions(mode=ExtractionMode.PROCESSORS)
    client = DocExtract(options)

    if processors is None and options.mode == ExtractionMode.PROCESSORS:
        from doc_extract.processors import default_processors

        processors = default_processors()

    for processor in processors or ():
        client.register_processor(processor)

    return asyncio.run(client.extract(document))
