"""Render chunk records into text blocks or NDJSON lines."""

from __future__ import annotations

import hashlib
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol

import orjson

from ..logging_utils import utc_now
from ..types import ChunkRecord, OutputFormat

Clock = Callable[[], datetime]
IdFactory = Callable[[str, int], str]
TokenEstimator = Callable[[str], int]


def estimate_tokens(text: str) -> int:
    """Approximate token count as a quarter of the character length."""

    # Half-up rounding; ``round`` would bank 2.5 down to 2.
    return int(math.floor(len(text) / 4 + 0.5))


def default_chunk_id(source: str, index: int) -> str:
    digest = hashlib.sha1(source.encode("utf-8"), usedforsecurity=False).hexdigest()[:10]
    return f"chunk_{digest}_{index:06d}"


@dataclass(frozen=True, slots=True)
class FormattedUnit:
    """Rendered record together with its UTF-8 encoded length."""

    text: str
    size: int

    @classmethod
    def from_text(cls, text: str) -> "FormattedUnit":
        return cls(text=text, size=len(text.encode("utf-8")))


class ChunkFormatter(Protocol):
    format: OutputFormat

    def render(self, record: ChunkRecord, index: int) -> FormattedUnit:
        ...


class TextFormatter:
    """Plain-text block with a metadata header line."""

    format = OutputFormat.TEXT

    def render(self, record: ChunkRecord, index: int) -> FormattedUnit:
        block = (
            f'[METADATA: Source="{record.source}" | Page={record.page}]\n'
            f"---\n{record.content}\n---\n\n"
        )
        return FormattedUnit.from_text(block)


class NdjsonFormatter:
    """One self-contained JSON object per line."""

    format = OutputFormat.NDJSON

    def __init__(
        self,
        *,
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None,
        token_estimator: Optional[TokenEstimator] = None,
    ) -> None:
        self.clock = clock or utc_now
        self.id_factory = id_factory or default_chunk_id
        self.token_estimator = token_estimator or estimate_tokens

    def render(self, record: ChunkRecord, index: int) -> FormattedUnit:
        payload = {
            "id": self.id_factory(record.source, index),
            "source": record.source,
            "page": record.page,
            "content": record.content,
            "tokens": self.token_estimator(record.content),
            "created_at": self.clock().isoformat(),
        }
        return FormattedUnit.from_text(orjson.dumps(payload).decode("utf-8") + "\n")


def get_formatter(output_format: OutputFormat | str, **kwargs) -> ChunkFormatter:
    """Return the formatter for ``output_format``; NDJSON options pass through."""

    fmt = OutputFormat(output_format)
    if fmt is OutputFormat.NDJSON:
        return NdjsonFormatter(**kwargs)
    return TextFormatter()
