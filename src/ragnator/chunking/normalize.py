"""Normalisation of raw page text and extraction of page sentinels."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

PAGE_MARKER_PATTERN = re.compile(r"\[PAGE_END:(\d+)\]")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]")
_NEWLINE_RUNS = re.compile(r"[\r\n]+")
_BLANK_RUNS = re.compile(r"[ \t]+")


@dataclass(frozen=True, slots=True)
class NormalizedSegment:
    """Cleaned text plus the page reported by an embedded sentinel, if any."""

    text: str
    page: Optional[int] = None


def page_marker(page: int) -> str:
    """Render the in-band sentinel closing ``page``."""

    return f"[PAGE_END:{page}]"


def normalize_segment(raw: str) -> NormalizedSegment:
    """Strip sentinels and control characters, then collapse whitespace.

    Literal ``[PAGE_END:n]`` text inside the document body is indistinguishable
    from a sentinel and is removed as well.
    """

    match = PAGE_MARKER_PATTERN.search(raw)
    page = int(match.group(1)) if match else None
    text = _CONTROL_CHARS.sub("", raw)
    # Removing one marker can splice the halves of an enclosing one together.
    while PAGE_MARKER_PATTERN.search(text):
        text = PAGE_MARKER_PATTERN.sub("", text)
    text = _NEWLINE_RUNS.sub("\n", text)
    text = _BLANK_RUNS.sub(" ", text)
    return NormalizedSegment(text=text, page=page)


def normalize_text(raw: str) -> str:
    return normalize_segment(raw).text
