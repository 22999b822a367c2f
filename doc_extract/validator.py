"""Document descriptor validation."""

from typing import Optional

import httpx

from doc_extract.config import TypeRegistry
from doc_extract.exceptions import (
    DisallowedTypeError,
    InvalidUrlError,
    MissingFilenameError,
    MissingSourceError,
    MissingTypeError,
)
from doc_extract.logger import get_logger
from doc_extract.models import Document
from doc_extract.resolver import ContentTypeResolver

logger = get_logger(__name__)


def is_valid_url(value: str) -> bool:
    """Return True if ``value`` parses as an absolute URL.

    Both a scheme and a host are required, so host-less URLs such as
    ``file:///tmp/a.pdf`` are rejected even though WHATWG URL parsers
    accept them.
    """
    try:
        return httpx.URL(value).is_absolute_url
    except (httpx.InvalidURL, TypeError, ValueError):
        return False


class DocumentValidator:
    """Checks documents before they are dispatched.

    Checks run in a fixed order and the first violation is raised.
    """

    def __init__(
        self,
        resolver: Optional[ContentTypeResolver] = None,
        require_filename: bool = True,
    ) -> None:
        """Initialize validator.

        Args:
            resolver: Resolver for URL documents without a type. If None, creates default.
            require_filename: Require a filename alongside inline contents.
        """
        self.resolver = resolver or ContentTypeResolver()
        self.require_filename = require_filename

    async def validate(
        self, document: Document, type_registry: Optional[TypeRegistry]
    ) -> Document:
        """Validate a document and resolve its type.

        Args:
            document: Document to validate
            type_registry: Allowed types. If None, any resolved type is admitted.

        Returns:
            A copy of the document carrying its resolved type

        Raises:
            MissingSourceError: If neither url nor contents is set
            MissingFilenameError: If contents are set without a filename
            MissingTypeError: If contents are set without a type
            InvalidUrlError: If the url is not absolute
            ResolutionFailedError: If the type probe fails
            MissingContentTypeError: If the type probe has no Content-Type
            DisallowedTypeError: If the type is outside the allow-sets
        """
        self.validate_structure(document)

        if not document.type:
            if not document.url:
                raise MissingTypeError("Document type is required when URL is not provided")
            document = document.with_type(await self.resolver.resolve(document.url))

        if type_registry is not None:
            self.validate_type(document, type_registry)
        return document

    def validate_structure(self, document: Document) -> Document:
        """Run the source, contents pairing and URL checks."""
        if not document.url and not document.has_contents:
            logger.warning("Rejected document without a source")
            raise MissingSourceError()

        if document.has_contents:
            if self.require_filename and not document.filename:
                logger.warning(
                    "Rejected contents without filename",
                    extra_data={"mime_type": document.type, "size_bytes": document.size_bytes},
                )
                raise MissingFilenameError()
            if not document.type:
                logger.warning(
                    "Rejected contents without type",
                    extra_data={"file_name": document.filename, "size_bytes": document.size_bytes},
                )
                raise MissingTypeError()

        if document.url and not is_valid_url(document.url):
            logger.warning("Rejected malformed URL", extra_data={"url": document.url})
            raise InvalidUrlError(document.url)

        return document

    @staticmethod
    def validate_type(document: Document, type_registry: TypeRegistry) -> Document:
        """Check the document type against the allow-sets."""
        if not document.type:
            raise MissingTypeError("Document type not provided, can not validate document type")

        if not type_registry.is_allowed(document.type):
            logger.warning(
                "Document type not allowed",
                extra_data={
                    "file_name": document.filename,
                    "mime_type": document.type,
                    "allowed_types": ", ".join(type_registry.allowed_types),
                },
            )
            raise DisallowedTypeError(document.type, type_registry.allowed_types)

        return document
