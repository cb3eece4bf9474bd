"""Page text extraction from PDF, EPUB and plain-text inputs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Protocol

import fitz  # type: ignore

from ..chunking.normalize import page_marker
from ..config import ExtractionConfig
from ..errors import ExtractionError, UnsupportedFormatError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PageSegment:
    """Raw text of one source page, or the failure that replaced it."""

    page_number: int
    text: str
    page_count: int
    error: Optional[str] = None


class DocumentExtractor(Protocol):
    def iter_pages(self, path: Path) -> Iterator[PageSegment]:
        ...


class FitzExtractor:
    """Extract page text with PyMuPDF, tagging each page with its sentinel."""

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self.config.supported_suffixes

    def iter_pages(self, path: Path) -> Iterator[PageSegment]:
        path = Path(path)
        if not self.supports(path):
            raise UnsupportedFormatError(f"Unsupported input format: {path.suffix or path.name}")
        if path.suffix.lower() == ".txt":
            yield PageSegment(page_number=1, text=path.read_text(encoding="utf-8", errors="replace"), page_count=1)
            return

        try:
            document = fitz.open(path)
        except Exception as exc:
            raise ExtractionError(f"Unable to open {path.name}: {exc}") from exc

        with document:
            total = int(document.page_count or 0)
            for index in range(total):
                number = index + 1
                try:
                    page = document.load_page(index)
                    raw = page.get_text("text") or ""
                except Exception as exc:
                    logger.warning("Page %d of %s failed to extract: %s", number, path.name, exc)
                    yield PageSegment(page_number=number, text="", page_count=total, error=str(exc))
                    continue
                text = " ".join(raw.split())
                yield PageSegment(page_number=number, text=f"{text} {page_marker(number)}\n", page_count=total)
