"""Document extraction client orchestration."""

from typing import Optional

from doc_extract.config import ClientOptions, ExtractionMode, validate_client_options
from doc_extract.exceptions import NoProcessorError
from doc_extract.interface import DocumentProcessor
from doc_extract.logger import Timer, get_logger
from doc_extract.models import EXTRACTION_SUCCESS_MARKER, Document
from doc_extract.registry import ProcessorRegistry
from doc_extract.resolver import ContentTypeResolver
from doc_extract.validator import DocumentValidator

logger = get_logger(__name__)


class DocExtract:
    """Validates documents and dispatches them to registered processors.

    A client runs in one of two modes:

    - ``ExtractionMode.ALLOWLIST`` (default): documents are checked against
      the allowed document and image types and ``extract`` returns
      ``"Document extracted"`` without extracting anything.
    - ``ExtractionMode.PROCESSORS``: after validation the document is handed
      to the processor registered for its type.

    Register processors before the client starts serving ``extract`` calls;
    the registries are not locked.

    Examples:
        >>> client = DocExtract(ClientOptions(mode=ExtractionMode.PROCESSORS))
        >>> client.register_processor(PdfProcessor())
        >>> text = await client.extract(Document(url="https://example.com/a.pdf"))
    """

    def __init__(
        self,
        options: Optional[ClientOptions] = None,
        *,
        resolver: Optional[ContentTypeResolver] = None,
    ) -> None:
        """Initialize client.

        Args:
            options: Client options. If None, uses allowlist mode with default types.
            resolver: Content-type resolver. If None, creates default with
                the options' probe timeout.

        Raises:
            InvalidOptionsError: If options are malformed
        """
        self.options = options or ClientOptions()
        self.type_registry = validate_client_options(self.options)
        self.processors = ProcessorRegistry()
        self.validator = DocumentValidator(
            resolver=resolver or ContentTypeResolver(timeout=self.options.probe_timeout),
            require_filename=self.options.strict_filename,
        )

        logger.info(
            "Initializing DocExtract client",
            extra_data={
                "mode": self.options.mode.value,
                "allowed_types": (
                    ", ".join(self.type_registry.allowed_types)
                    if self.type_registry is not None
                    else None
                ),
                "require_filename": self.options.strict_filename,
            },
        )

    @classmethod
    def with_processors(
        cls, *processors: DocumentProcessor, options: Optional[ClientOptions] = None
    ) -> "DocExtract":
        """Create a processor-mode client with ``processors`` registered."""
        options = options or ClientOptions(mode=ExtractionMode.PROCESSORS)
        client = cls(options)
        for processor in processors:
            client.register_processor(processor)
        return client

    @property
    def mode(self) -> ExtractionMode:
        return self.options.mode

    def register_processor(self, processor: DocumentProcessor) -> None:
        """Register a processor under its ``supported_mime_type``.

        A later processor for the same type replaces the earlier one.
        """
        self.processors.register(processor)

    def supports_document_type(self, mime_type: str) -> bool:
        return self.processors.supports(mime_type)

    def get_supported_mime_types(self) -> list[str]:
        return self.processors.supported_mime_types()

    async def extract(self, document: Document) -> str:
        """Extract text from a document.

        Args:
            document: Document with a url and/or inline contents

        Returns:
            The processor's text in processor mode, or "Document extracted"
            in allowlist mode

        Raises:
            MissingSourceError: If neither url nor contents is set
            MissingFilenameError: If contents lack a filename (strict mode)
            MissingTypeError: If contents lack a type
            InvalidUrlError: If the url is not absolute
            ResolutionFailedError: If the content-type probe fails
            MissingContentTypeError: If the probe returns no Content-Type
            DisallowedTypeError: If the type is outside the allow-sets
            NoProcessorError: If no processor is registered for the type
        """
        with Timer("validation") as validate_timer:
            validated = await self.validator.validate(document, self.type_registry)

        logger.debug(
            "Document validation completed",
            extra_data={
                "file_name": validated.filename,
                "mime_type": validated.type,
                "type_resolved": document.type != validated.type,
                "validation_time_ms": validate_timer.get_elapsed_ms(),
            },
        )

        if self.options.mode == ExtractionMode.ALLOWLIST:
            return EXTRACTION_SUCCESS_MARKER

        processor = self.processors.get(validated.type)
        if processor is None:
            logger.warning(
                "No processor registered for document type",
                extra_data={
                    "mime_type": validated.type,
                    "registered_types": ", ".join(self.processors.supported_mime_types()),
                },
            )
            raise NoProcessorError(validated.type, self.processors.supported_mime_types())

        logger.info(
            "Dispatching document to processor",
            extra_data={
                "file_name": validated.filename,
                "mime_type": validated.type,
                "processor": type(processor).__name__,
                "file_size_bytes": validated.size_bytes,
            },
        )
        return await processor.process(validated)
