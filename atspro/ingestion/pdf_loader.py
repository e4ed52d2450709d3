from __future__ import annotations

import asyncio
import enum
import importlib
import logging
from functools import lru_cache
from types import ModuleType
from typing import Callable

from atspro.core.config import settings
from atspro.core.errors import PDF_LIBRARY_MESSAGE, PdfLibraryLoadError
from atspro.ingestion.pdf_extract import PdfTextLibrary, PypdfLibrary

logger = logging.getLogger(__name__)


class LoaderState(str, enum.Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def _configure_pypdf(module: ModuleType) -> PdfTextLibrary:
    if not callable(getattr(module, "PdfReader", None)):
        raise TypeError(f"{module.__name__} does not provide a pypdf-compatible PdfReader")
    # pypdf logs a warning for every recoverable syntax issue it meets.
    logging.getLogger(module.__name__).setLevel(logging.ERROR)
    return PypdfLibrary(module)


class PdfLibraryLoader:
    """Loads the PDF text-extraction library on first use and caches it.

    Concurrent ``ensure_loaded`` callers share a single in-flight load. A
    failed load rejects all of them and leaves the loader retryable.
    """

    def __init__(
        self,
        module_name: str = "pypdf",
        *,
        importer: Callable[[str], ModuleType] = importlib.import_module,
        configure: Callable[[ModuleType], PdfTextLibrary] = _configure_pypdf,
    ):
        self._module_name = module_name
        self._importer = importer
        self._configure = configure
        self._state = LoaderState.NOT_LOADED
        self._library: PdfTextLibrary | None = None
        self._pending: asyncio.Future[PdfTextLibrary] | None = None
        self.load_count = 0

    @property
    def state(self) -> LoaderState:
        return self._state

    async def ensure_loaded(self) -> PdfTextLibrary:
        if self._state is LoaderState.LOADED and self._library is not None:
            return self._library
        if self._pending is None:
            self._state = LoaderState.LOADING
            self._pending = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._pending)

    async def _load(self) -> PdfTextLibrary:
        self.load_count += 1
        try:
            module = await asyncio.to_thread(self._importer, self._module_name)
            library = self._configure(module)
        except Exception as exc:
            self._state = LoaderState.FAILED
            logger.warning("pdf_library_load_failed module=%s: %s", self._module_name, exc)
            raise PdfLibraryLoadError(PDF_LIBRARY_MESSAGE) from exc
        finally:
            self._pending = None
        self._library = library
        self._state = LoaderState.LOADED
        logger.info("pdf_library_loaded module=%s", self._module_name)
        return library


@lru_cache(maxsize=1)
def get_pdf_loader() -> PdfLibraryLoader:
    return PdfLibraryLoader(settings.pdf_library_module)
