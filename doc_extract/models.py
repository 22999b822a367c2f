"""Data models for doc-extract."""

from dataclasses import dataclass, replace
from typing import Optional

# Returned by allowlist-mode clients, which admit documents without extracting them
EXTRACTION_SUCCESS_MARKER = "Document extracted"


@dataclass(frozen=True)
class Document:
    """A document handed to ``DocExtract.extract``.

    Either ``url`` or ``contents`` must be set. Inline contents need a
    ``type`` (and a ``filename`` in strict mode); URL-only documents may
    leave both out and have the type probed from the server.
    """

    filename: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    contents: Optional[bytes] = None

    @property
    def has_contents(self) -> bool:
        # Zero-length buffers still count as an inline source
        return self.contents is not None

    @property
    def size_bytes(self) -> int:
        return len(self.contents) if self.contents is not None else 0

    def with_type(self, mime_type: str) -> "Document":
        return replace(self, type=mime_type)
