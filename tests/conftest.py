"""Test configuration ensuring the local package is importable."""
from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ragnator.chunking.normalize import page_marker  # noqa: E402
from ragnator.config import ChunkerConfig  # noqa: E402
from ragnator.errors import ExtractionError  # noqa: E402
from ragnator.extract.extractor import PageSegment  # noqa: E402

FIXED_NOW = datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)


class FakeExtractor:
    """In-memory extractor keyed by file name.

    Each value is a list of page texts; ``None`` marks a page that fails, and a
    whole-document failure is simulated with an :class:`ExtractionError` entry.
    """

    def __init__(self, documents: Dict[str, object]) -> None:
        self.documents = documents
        self.opened: List[str] = []

    def iter_pages(self, path: Path) -> Iterator[PageSegment]:
        self.opened.append(path.name)
        pages = self.documents[path.name]
        if isinstance(pages, Exception):
            raise pages
        total = len(pages)
        for number, text in enumerate(pages, start=1):
            if text is None:
                yield PageSegment(page_number=number, text="", page_count=total, error="bad page")
                continue
            yield PageSegment(page_number=number, text=f"{text} {page_marker(number)}\n", page_count=total)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_files(tmp_path: Path):
    def _make(*names: str) -> List[Path]:
        paths = []
        for name in names:
            path = tmp_path / name
            path.write_bytes(b"placeholder")
            paths.append(path)
        return paths

    return _make


@pytest.fixture
def broken_document() -> ExtractionError:
    return ExtractionError("Unable to open broken.pdf: damaged xref")


@pytest.fixture
def fake_extractor():
    return FakeExtractor


@pytest.fixture
def small_chunker_config() -> ChunkerConfig:
    return ChunkerConfig(target_size=100, overlap_window=20, search_radius=10, min_chunk_chars=5)
