"""Image processor using Tesseract OCR."""

import io
import os
from typing import Optional

import httpx
import pytesseract
from PIL import Image, ImageEnhance, ImageOps

from doc_extract.config import DEFAULT_ALLOWED_IMAGES, OCRConfig
from doc_extract.logger import Timer, get_logger
from doc_extract.processors.base import BaseProcessor

logger = get_logger(__name__)


class ImageProcessor(BaseProcessor):
    """OCRs images with Tesseract.

    The registry matches exact types only, so an instance serves a single
    image type; use ``for_all_types`` to get one instance per default type.
    """

    supported_mime_types: tuple[str, ...] = DEFAULT_ALLOWED_IMAGES
    kind = "image"

    def __init__(
        self,
        mime_type: str = "image/jpeg",
        config: Optional[OCRConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if mime_type not in self.supported_mime_types:
            raise ValueError(
                f"ImageProcessor supports {', '.join(self.supported_mime_types)}, got {mime_type}"
            )
        super().__init__(config, http_client)
        self.supported_mime_type = mime_type

        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd
        if self.config.tessdata_prefix:
            os.environ["TESSDATA_PREFIX"] = self.config.tessdata_prefix

    @classmethod
    def for_all_types(
        cls,
        config: Optional[OCRConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> list["ImageProcessor"]:
        return [cls(mime_type, config, http_client) for mime_type in cls.supported_mime_types]

    def _extract(self, file_bytes: bytes, file_name: str) -> str:
        image = Image.open(io.BytesIO(file_bytes))
        image_format = image.format
        width, height = image.size

        if self.config.enable_image_preprocessing:
            image = self.preprocess(image)

        with Timer("image_ocr") as timer:
            text = pytesseract.image_to_string(
                image,
                lang=self.config.languages,
                config=self.config.tesseract_config,
            )

        result = text.strip()
        logger.debug(
            "Image OCR completed",
            extra_data={
                "file_name": file_name,
                "image_format": image_format,
                "image_dimensions": f"{width}x{height}",
                "characters_extracted": len(result),
                "ocr_time_ms": timer.get_elapsed_ms(),
            },
        )
        return result

    def preprocess(self, image: Image.Image) -> Image.Image:
        """Grayscale and contrast-boost an image before OCR."""
        image = ImageOps.grayscale(image)
        if self.config.contrast_enhancement != 1.0:
            image = ImageEnhance.Contrast(image).enhance(self.config.contrast_enhancement)
        return image
