"""Normalisation, page tracking and streaming chunk cuts."""

from .normalize import NormalizedSegment, normalize_segment, normalize_text, page_marker
from .pages import PageTracker
from .stream import StreamChunker

__all__ = [
    "NormalizedSegment",
    "PageTracker",
    "StreamChunker",
    "normalize_segment",
    "normalize_text",
    "page_marker",
]
