"""Word processors: python-docx for OOXML, converters for legacy formats."""

import shutil
import subprocess
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Optional

import docx
import httpx

from doc_extract.config import OCRConfig
from doc_extract.logger import Timer, get_logger
from doc_extract.processors.base import BaseProcessor

logger = get_logger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MSWORD_MIME_TYPE = "application/msword"
ODT_MIME_TYPE = "application/vnd.oasis.opendocument.text"

_CONVERTER_SUFFIXES = {
    MSWORD_MIME_TYPE: ".doc",
    ODT_MIME_TYPE: ".odt",
}


class DocxProcessor(BaseProcessor):
    """Extracts paragraphs and tables (as markdown) from .docx files."""

    supported_mime_type = DOCX_MIME_TYPE
    kind = "DOCX"

    def _extract(self, file_bytes: bytes, file_name: str) -> str:
        document = docx.Document(BytesIO(file_bytes))

        paragraphs = [para.text.strip() for para in document.paragraphs if para.text.strip()]

        tables = []
        for table in document.tables:
            rows = []
            for i, row in enumerate(table.rows):
                cells = [cell.text.strip() for cell in row.cells]
                rows.append(" | ".join(cells))
                if i == 0:
                    rows.append(" | ".join(["---"] * len(cells)))
            if rows:
                tables.append("\n".join(rows))

        logger.debug(
            "DOCX extraction completed",
            extra_data={
                "file_name": file_name,
                "paragraph_count": len(paragraphs),
                "table_count": len(tables),
            },
        )
        return "\n\n".join(paragraphs + tables)


class OfficeProcessor(BaseProcessor):
    """Extracts legacy Word (.doc) or OpenDocument (.odt) text via system converters.

    Tries macOS ``textutil`` first, then LibreOffice ``soffice`` in headless
    mode. One instance serves one MIME type.
    """

    kind = "office document"

    def __init__(
        self,
        mime_type: str = MSWORD_MIME_TYPE,
        config: Optional[OCRConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if mime_type not in _CONVERTER_SUFFIXES:
            raise ValueError(
                f"OfficeProcessor supports {', '.join(_CONVERTER_SUFFIXES)}, got {mime_type}"
            )
        super().__init__(config, http_client)
        self.supported_mime_type = mime_type
        self.suffix = _CONVERTER_SUFFIXES[mime_type]

    def _extract(self, file_bytes: bytes, file_name: str) -> str:
        with tempfile.TemporaryDirectory() as tmp_dir:
            source = Path(tmp_dir) / f"source{self.suffix}"
            source.write_bytes(file_bytes)

            if shutil.which("textutil"):
                text = self._convert_with_textutil(source, file_name)
                if text:
                    return text

            soffice = shutil.which("soffice") or shutil.which("libreoffice")
            if soffice:
                return self._convert_with_soffice(soffice, source, file_name)

        raise RuntimeError(
            f"No converter available for {self.suffix} files. "
            "Install textutil (macOS) or LibreOffice, or convert to DOCX."
        )

    def _convert_with_textutil(self, source: Path, file_name: str) -> str:
        with Timer("textutil_conversion") as timer:
            result = subprocess.run(
                ["textutil", "-convert", "txt", str(source), "-stdout"],
                capture_output=True,
                text=True,
                timeout=self.config.converter_timeout,
            )

        text = result.stdout.strip() if result.returncode == 0 else ""
        logger.debug(
            "textutil conversion finished",
            extra_data={
                "file_name": file_name,
                "return_code": result.returncode,
                "characters_extracted": len(text),
                "conversion_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    def _convert_with_soffice(self, soffice: str, source: Path, file_name: str) -> str:
        out_dir = source.parent / "out"
        with Timer("soffice_conversion") as timer:
            conversion = subprocess.run(
                [
                    soffice,
                    "--headless",
                    "--convert-to",
                    "txt:Text",
                    str(source),
                    "--outdir",
                    str(out_dir),
                ],
                capture_output=True,
                text=True,
                timeout=self.config.converter_timeout,
            )

        out_path = out_dir / f"{source.stem}.txt"
        if conversion.returncode != 0 or not out_path.exists():
            raise RuntimeError(
                f"soffice conversion failed with code {conversion.returncode}: "
                f"{conversion.stderr.strip()}"
            )

        text = out_path.read_text(encoding="utf-8", errors="ignore").strip()
        logger.debug(
            "soffice conversion finished",
            extra_data={
                "file_name": file_name,
                "characters_extracted": len(text),
                "conversion_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text
