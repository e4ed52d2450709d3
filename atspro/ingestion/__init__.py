from .documents import DocumentIngestor, FileUpload, declared_type
from .pdf_extract import PdfTextDocument, PdfTextLibrary, PypdfLibrary, extract_pdf_text
from .pdf_loader import LoaderState, PdfLibraryLoader, get_pdf_loader

__all__ = [
    "DocumentIngestor",
    "FileUpload",
    "declared_type",
    "PdfTextDocument",
    "PdfTextLibrary",
    "PypdfLibrary",
    "extract_pdf_text",
    "LoaderState",
    "PdfLibraryLoader",
    "get_pdf_loader",
]
