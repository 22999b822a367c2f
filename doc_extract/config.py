"""Configuration classes for doc-extract."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from doc_extract.exceptions import InvalidOptionsError

DEFAULT_ALLOWED_DOCUMENTS: tuple[str, ...] = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.oasis.opendocument.text",
)

DEFAULT_ALLOWED_IMAGES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/jpg",
    "image/webp",
)

_MIME_TYPE_PATTERN = re.compile(r"^[\w.+-]+/[\w.+-]+$")


class ExtractionMode(str, Enum):
    """Deployment mode of a client."""

    ALLOWLIST = "allowlist"  # Admission control only, nothing is extracted
    PROCESSORS = "processors"  # Dispatch to registered processors


@dataclass(frozen=True)
class TypeRegistry:
    """Allowed document and image MIME types for one client."""

    allowed_documents: tuple[str, ...] = DEFAULT_ALLOWED_DOCUMENTS
    allowed_images: tuple[str, ...] = DEFAULT_ALLOWED_IMAGES

    @property
    def allowed_types(self) -> tuple[str, ...]:
        return self.allowed_documents + self.allowed_images

    def is_allowed(self, mime_type: str) -> bool:
        return mime_type in self.allowed_documents or mime_type in self.allowed_images


@dataclass
class ClientOptions:
    """Options accepted by ``DocExtract``.

    Examples:
        >>> # Default allowlist client
        >>> options = ClientOptions()

        >>> # Only accept JPEG images, default document types
        >>> options = ClientOptions(allowed_images=["image/jpeg"])

        >>> # Dispatch to registered processors, no allow-set gate
        >>> options = ClientOptions(mode=ExtractionMode.PROCESSORS)
    """

    allowed_images: Optional[Sequence[str]] = None
    """Accepted image types. None means the defaults (allowlist mode) or no
    gate at all when neither list is set (processor mode)."""

    allowed_documents: Optional[Sequence[str]] = None
    """Accepted document types, same defaulting rules as ``allowed_images``."""

    mode: ExtractionMode = ExtractionMode.ALLOWLIST

    require_filename: Optional[bool] = None
    """Require ``filename`` alongside inline contents.

    None picks the mode default: required in allowlist mode, optional in
    processor mode.
    """

    probe_timeout: float = 10.0
    """Seconds allowed for the content-type HEAD probe."""

    @property
    def strict_filename(self) -> bool:
        if self.require_filename is not None:
            return self.require_filename
        return self.mode == ExtractionMode.ALLOWLIST


def _normalize_types(name: str, values: Sequence[str]) -> tuple[str, ...]:
    if isinstance(values, (str, bytes)):
        raise InvalidOptionsError(f"{name} must be a list of MIME types, not a string")

    normalized: list[str] = []
    for value in values:
        if not isinstance(value, str) or not _MIME_TYPE_PATTERN.match(value):
            raise InvalidOptionsError(
                f"{name} contains an invalid MIME type: {value!r}",
                {"option": name},
            )
        if value not in normalized:
            normalized.append(value)

    return tuple(normalized)


def validate_client_options(options: Optional[ClientOptions]) -> Optional[TypeRegistry]:
    """Validate client options and build the type registry they describe.

    An empty allow-list admits no type of that kind. A string ``mode`` is
    coerced to ``ExtractionMode`` in place.

    Args:
        options: Client options. If None, uses defaults.

    Returns:
        The TypeRegistry gating admission, or None when the client runs in
        processor mode without any allow-list.

    Raises:
        InvalidOptionsError: If an option is malformed
    """
    options = options or ClientOptions()

    try:
        options.mode = ExtractionMode(options.mode)
    except ValueError as exc:
        raise InvalidOptionsError(
            f"mode must be one of: {', '.join(m.value for m in ExtractionMode)}",
            {"mode": options.mode},
        ) from exc

    if options.probe_timeout <= 0:
        raise InvalidOptionsError(
            "probe_timeout must be positive", {"probe_timeout": options.probe_timeout}
        )

    if (
        options.mode == ExtractionMode.PROCESSORS
        and options.allowed_images is None
        and options.allowed_documents is None
    ):
        return None

    allowed_documents = DEFAULT_ALLOWED_DOCUMENTS
    if options.allowed_documents is not None:
        allowed_documents = _normalize_types("allowed_documents", options.allowed_documents)

    allowed_images = DEFAULT_ALLOWED_IMAGES
    if options.allowed_images is not None:
        allowed_images = _normalize_types("allowed_images", options.allowed_images)

    return TypeRegistry(allowed_documents=allowed_documents, allowed_images=allowed_images)


@dataclass
class OCRConfig:
    """Configuration for the bundled processors' OCR and parsing.

    All parameters are configurable to optimize for different environments
    (VPS, local machines, cloud servers, etc.) and use cases.

    Examples:
        >>> # Default configuration (optimized for 4GB RAM, 4 vCPU)
        >>> config = OCRConfig()

        >>> # High quality configuration for powerful systems
        >>> config = OCRConfig(dpi=300, max_workers=7)
    """

    tesseract_cmd: str = "tesseract"
    """Path to tesseract binary. Default: "tesseract" (assumes in PATH)."""

    tessdata_prefix: Optional[str] = None
    """Optional path to tessdata directory. If None, uses system default."""

    languages: str = "eng"
    """OCR languages in Tesseract format (e.g., "eng", "eng+fra")."""

    dpi: int = 150
    """Image DPI for rendering PDF pages before OCR.

    Recommended values:
    - 120: Fastest, lowest memory, acceptable quality
    - 150: Default, balanced speed/quality/memory
    - 300: Best quality, ~2x memory
    """

    psm_mode: int = 6
    """Tesseract page segmentation mode (0-13). Default: 6 (uniform block of text)."""

    max_workers: int = 3
    """Number of parallel workers for PDF page OCR."""

    pdf_ocr_min_chars: int = 500
    """Minimum characters extracted from native PDF to skip OCR."""

    pdf_ocr_min_chars_per_page: int = 150
    """Minimum characters per page from native PDF to skip OCR."""

    pdf_ocr_min_file_size_bytes: int = 200_000
    """Files smaller than this are not OCRed on the absolute-character rule."""

    enable_image_preprocessing: bool = True
    """Convert images to grayscale and boost contrast before OCR."""

    contrast_enhancement: float = 1.2
    """Contrast factor for image preprocessing (1.0 = unchanged)."""

    use_oem_1: bool = True
    """Use Tesseract OEM 1 (LSTM engine only)."""

    table_strategy: str = "lines_strict"
    fontsize_limit: int = 3
    force_text: bool = True

    fetch_timeout: float = 30.0
    """Seconds allowed when a processor downloads a URL-only document."""

    converter_timeout: float = 120.0
    """Seconds allowed for a textutil or soffice conversion."""

    extra_tesseract_args: list[str] = field(default_factory=list)

    @property
    def tesseract_config(self) -> str:
        args = [f"--psm {self.psm_mode}"]
        if self.use_oem_1:
            args.append("--oem 1")
        args.extend(self.extra_tesseract_args)
        return " ".join(args)
