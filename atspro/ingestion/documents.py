from __future__ import annotations

import logging
from dataclasses import dataclass

from atspro.core.errors import (
    PDF_READ_MESSAGE,
    UNSUPPORTED_FILE_MESSAGE,
    IngestionError,
)
from atspro.ingestion.pdf_extract import extract_pdf_text
from atspro.ingestion.pdf_loader import PdfLibraryLoader, get_pdf_loader

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
TEXT_CONTENT_TYPE = "text/plain"

_EXTENSION_CONTENT_TYPES = {
    "pdf": PDF_CONTENT_TYPE,
    "txt": TEXT_CONTENT_TYPE,
}
_UNDECLARED_CONTENT_TYPES = {"", "application/octet-stream"}


@dataclass(frozen=True)
class FileUpload:
    filename: str
    content_type: str
    data: bytes


def declared_type(upload: FileUpload) -> str:
    """Normalize the upload's declared type, inferring it from the extension when absent."""
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type not in _UNDECLARED_CONTENT_TYPES:
        return content_type
    filename = upload.filename or ""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return _EXTENSION_CONTENT_TYPES.get(ext, content_type)


class DocumentIngestor:
    def __init__(self, loader: PdfLibraryLoader | None = None):
        self._loader = loader

    @property
    def loader(self) -> PdfLibraryLoader:
        return self._loader or get_pdf_loader()

    def is_pdf(self, upload: FileUpload) -> bool:
        return declared_type(upload) == PDF_CONTENT_TYPE

    async def read(self, upload: FileUpload) -> str:
        kind = declared_type(upload)
        if kind == PDF_CONTENT_TYPE:
            return await self._read_pdf(upload)
        if kind == TEXT_CONTENT_TYPE:
            return upload.data.decode("utf-8-sig", errors="replace")
        logger.info("ingest_unsupported_type filename=%s type=%s", upload.filename, kind or "unknown")
        raise IngestionError(UNSUPPORTED_FILE_MESSAGE)

    async def _read_pdf(self, upload: FileUpload) -> str:
        library = await self.loader.ensure_loaded()
        try:
            text = await extract_pdf_text(upload.data, library)
        except Exception as exc:  # noqa: BLE001 - any parser failure means an unreadable PDF
            logger.warning("ingest_pdf_failed filename=%s bytes=%s: %s", upload.filename, len(upload.data), exc)
            raise IngestionError(PDF_READ_MESSAGE) from exc
        logger.info("ingest_pdf_ok filename=%s chars=%s", upload.filename, len(text))
        return text
