"""Pluggable document text extraction with validation and dispatch."""

from doc_extract.api import extract_document
from doc_extract.client import DocExtract
from doc_extract.config import (
    DEFAULT_ALLOWED_DOCUMENTS,
    DEFAULT_ALLOWED_IMAGES,
    ClientOptions,
    ExtractionMode,
    OCRConfig,
    TypeRegistry,
    validate_client_options,
)
from doc_extract.exceptions import (
    ContentTypeResolutionError,
    DisallowedTypeError,
    DocExtractError,
    DocumentValidationError,
    InvalidOptionsError,
    InvalidUrlError,
    MissingContentTypeError,
    MissingFilenameError,
    MissingSourceError,
    MissingTypeError,
    NoProcessorError,
    ProcessingFailedError,
    ResolutionFailedError,
)
from doc_extract.interface import DocumentProcessor
from doc_extract.models import EXTRACTION_SUCCESS_MARKER, Document
from doc_extract.registry import ProcessorRegistry
from doc_extract.resolver import ContentTypeResolver, parse_mime_type
from doc_extract.validator import DocumentValidator, is_valid_url

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "extract_document",
    # Core classes
    "DocExtract",
    "DocumentValidator",
    "ContentTypeResolver",
    "ProcessorRegistry",
    "DocumentProcessor",
    "is_valid_url",
    "parse_mime_type",
    # Data models
    "Document",
    "EXTRACTION_SUCCESS_MARKER",
    # Configuration
    "ClientOptions",
    "ExtractionMode",
    "TypeRegistry",
    "OCRConfig",
    "DEFAULT_ALLOWED_DOCUMENTS",
    "DEFAULT_ALLOWED_IMAGES",
    "validate_client_options",
    # Exceptions
    "DocExtractError",
    "InvalidOptionsError",
    "DocumentValidationError",
    "MissingSourceError",
    "MissingFilenameError",
    "MissingTypeError",
    "InvalidUrlError",
    "ContentTypeResolutionError",
    "ResolutionFailedError",
    "MissingContentTypeError",
    "DisallowedTypeError",
    "NoProcessorError",
    "ProcessingFailedError",
]
