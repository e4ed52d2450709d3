from __future__ import annotations

from typing import Literal

ErrorKind = Literal["configuration", "validation", "ingestion", "transport", "parse", "identity"]

ANALYSIS_FAILED_MESSAGE = "Analysis failed. Check your API key or connection."
MISSING_INPUT_MESSAGE = "Please provide both a resume and a job description."
MISSING_API_KEY_MESSAGE = "API Key missing! Please add GEMINI_API_KEY to your .env file."
PDF_READ_MESSAGE = "Could not read PDF. Ensure it is text-based (not scanned)."
PDF_LIBRARY_MESSAGE = "Failed to load PDF library. Please try again."
UNSUPPORTED_FILE_MESSAGE = "Unsupported file type. Please use PDF or TXT."
IDENTITY_DISABLED_MESSAGE = "Firebase not configured. Check your .env file."
SIGN_IN_FAILED_MESSAGE = "Login failed. Please check your Firebase configuration."


class OperationError(RuntimeError):
    kind: ErrorKind = "transport"

    def __init__(self, message: str, *, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(OperationError):
    kind: ErrorKind = "configuration"


class InputValidationError(OperationError):
    kind: ErrorKind = "validation"


class IngestionError(OperationError):
    kind: ErrorKind = "ingestion"


class PdfLibraryLoadError(IngestionError):
    pass


class TransportError(OperationError):
    kind: ErrorKind = "transport"


class ResponseParseError(OperationError):
    kind: ErrorKind = "parse"


class IdentityError(OperationError):
    kind: ErrorKind = "identity"
