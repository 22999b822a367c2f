"""Interface the dispatcher expects from document processors."""

from typing import Protocol, runtime_checkable

from doc_extract.models import Document


@runtime_checkable
class DocumentProcessor(Protocol):
    """Anything that turns documents of one MIME type into text.

    ``supported_mime_type`` is the only key the processor is registered
    under. ``process`` receives the validated document as-is: a processor
    given a URL-only document fetches the bytes itself.
    """

    supported_mime_type: str

    async def process(self, document: Document) -> str:
        ...
