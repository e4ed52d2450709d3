from __future__ import annotations

import asyncio
from io import BytesIO
from types import ModuleType
from typing import Any, Protocol


class PdfTextDocument(Protocol):
    @property
    def page_count(self) -> int: ...

    def page_fragments(self, number: int) -> list[str]: ...


class PdfTextLibrary(Protocol):
    def open(self, data: bytes) -> PdfTextDocument: ...


class PypdfDocument:
    def __init__(self, reader: Any):
        self._reader = reader

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    def page_fragments(self, number: int) -> list[str]:
        """Return the text runs of page ``number`` (1-indexed) in content-stream order."""
        if number < 1 or number > self.page_count:
            raise IndexError(f"Page {number} out of range 1..{self.page_count}")
        fragments: list[str] = []

        def visitor(text: str, _cm: Any, _tm: Any, _font_dict: Any, _font_size: Any) -> None:
            if text:
                fragments.append(text)

        self._reader.pages[number - 1].extract_text(visitor_text=visitor)
        return fragments


class PypdfLibrary:
    def __init__(self, module: ModuleType):
        self._module = module

    def open(self, data: bytes) -> PypdfDocument:
        return PypdfDocument(self._module.PdfReader(BytesIO(data)))


async def extract_pdf_text(data: bytes, library: PdfTextLibrary) -> str:
    """Concatenate every page's text: fragments space-joined, pages newline-joined."""
    document = await asyncio.to_thread(library.open, data)
    pages: list[str] = []
    for number in range(1, document.page_count + 1):
        fragments = await asyncio.to_thread(document.page_fragments, number)
        pages.append(" ".join(fragments))
    return "\n".join(pages)
