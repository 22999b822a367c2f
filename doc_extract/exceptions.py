"""Custom exceptions for doc-extract.

Every failure the core can raise is its own class so callers can branch on
the kind of failure instead of matching message strings.
"""

from typing import Any, Optional, Sequence


class DocExtractError(Exception):
    """Base exception for doc-extract errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidOptionsError(DocExtractError):
    """Raised when client options fail validation."""

    pass


# =============================================================================
# Document validation
# =============================================================================


class DocumentValidationError(DocExtractError):
    """Base exception for structurally invalid documents."""

    pass


class MissingSourceError(DocumentValidationError):
    """Raised when a document has neither a url nor contents."""

    def __init__(self) -> None:
        super().__init__("Document must have a url or contents")


class MissingFilenameError(DocumentValidationError):
    """Raised when contents are given without a filename."""

    def __init__(self) -> None:
        super().__init__("Filename is required when providing document contents")


class MissingTypeError(DocumentValidationError):
    """Raised when a document's type is neither given nor resolvable."""

    def __init__(self, message: str = "Type is required when providing document contents") -> None:
        super().__init__(message)


class InvalidUrlError(DocumentValidationError):
    """Raised when a document url is not an absolute URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL format: {url}")
        self.url = url


# =============================================================================
# Content-type resolution
# =============================================================================


class ContentTypeResolutionError(DocExtractError):
    """Base exception for content-type probe failures."""

    pass


class ResolutionFailedError(ContentTypeResolutionError):
    """Raised when the content-type probe does not succeed."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: Optional[str] = None) -> None:
        if status_code is not None:
            message = f"HTTP error! status: {status_code}"
        else:
            message = f"Content-type probe failed for {url}: {reason}"
        super().__init__(message, {"url": url})
        self.url = url
        self.status_code = status_code


class MissingContentTypeError(ContentTypeResolutionError):
    """Raised when the probe response carries no usable Content-Type header."""

    def __init__(self, url: str) -> None:
        super().__init__("Content-Type header not found", {"url": url})
        self.url = url


# =============================================================================
# Admission and dispatch
# =============================================================================


class DisallowedTypeError(DocExtractError):
    """Raised when a document type is outside the configured allow-sets."""

    def __init__(self, mime_type: str, allowed_types: Sequence[str]) -> None:
        super().__init__(
            f"File type '{mime_type}' is not allowed. "
            f"Allowed types: {', '.join(allowed_types)}"
        )
        self.mime_type = mime_type
        self.allowed_types = tuple(allowed_types)


class NoProcessorError(DocExtractError):
    """Raised when no processor is registered for an admitted type."""

    def __init__(self, mime_type: str, registered_types: Sequence[str] = ()) -> None:
        super().__init__(f"No processor registered for document type: {mime_type}")
        self.mime_type = mime_type
        self.registered_types = tuple(registered_types)


class ProcessingFailedError(DocExtractError):
    """Raised by the bundled processors when text extraction fails."""

    def __init__(self, mime_type: str, message: str) -> None:
        super().__init__(message, {"mime_type": mime_type})
        self.mime_type = mime_type
