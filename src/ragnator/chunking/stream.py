"""Incremental chunking of a normalised text stream."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..config import ChunkerConfig
from ..types import ChunkRecord
from .normalize import normalize_segment
from .pages import PageTracker

logger = logging.getLogger(__name__)

_SENTENCE_END = re.compile(r"[.!?]\s")


class StreamChunker:
    """Buffer one document's text and cut it into overlapping chunks.

    ``process_text`` cuts whenever at least ``target_size + overlap_window``
    characters are buffered, preferring a sentence end and then a newline
    within ``search_radius`` of the target offset. Each non-final cut keeps
    the last ``overlap_window`` characters before the cut as the start of the
    next chunk. ``flush`` drains the rest without boundary search or overlap.
    """

    def __init__(self, source: str, config: Optional[ChunkerConfig] = None) -> None:
        self.source = source
        self.config = config or ChunkerConfig()
        self.pages = PageTracker()
        self.dropped = 0
        self._buffer = ""

    @property
    def buffer(self) -> str:
        return self._buffer

    def process_text(self, segment: str) -> List[ChunkRecord]:
        normalized = normalize_segment(segment)
        self.pages.observe(normalized.page)
        self._buffer += normalized.text

        emitted: List[ChunkRecord] = []
        threshold = self.config.target_size + self.config.overlap_window
        while len(self._buffer) >= threshold:
            record = self._cut(final=False)
            if record is not None:
                emitted.append(record)
        return emitted

    def flush(self) -> List[ChunkRecord]:
        emitted: List[ChunkRecord] = []
        while self._buffer:
            record = self._cut(final=True)
            if record is not None:
                emitted.append(record)
        return emitted

    def _cut(self, *, final: bool) -> Optional[ChunkRecord]:
        cfg = self.config
        buffer = self._buffer
        end = min(cfg.target_size, len(buffer))
        if final:
            if len(buffer) <= cfg.target_size + cfg.overlap_window:
                end = len(buffer)
        elif end < len(buffer):
            end = self._boundary(buffer, end)

        content = buffer[:end].strip()
        record: Optional[ChunkRecord] = None
        if len(content) > cfg.min_chunk_chars:
            record = ChunkRecord(content=content, source=self.source, page=self.pages.current)
        else:
            self.dropped += 1
            logger.debug("Dropped %d-char fragment from %s", len(content), self.source)

        if final:
            self._buffer = buffer[end:]
        else:
            self._buffer = buffer[end - cfg.overlap_window :]
        return record

    def _boundary(self, buffer: str, end: int) -> int:
        radius = self.config.search_radius
        start = max(0, end - radius)
        window = buffer[start : end + radius]
        match = _SENTENCE_END.search(window)
        if match:
            return start + match.start() + 1
        newline = window.find("\n")
        if newline != -1:
            return start + newline
        return end
