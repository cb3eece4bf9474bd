from .formatter import (
    ChunkFormatter,
    FormattedUnit,
    NdjsonFormatter,
    TextFormatter,
    default_chunk_id,
    estimate_tokens,
    get_formatter,
)

__all__ = [
    "ChunkFormatter",
    "FormattedUnit",
    "NdjsonFormatter",
    "TextFormatter",
    "default_chunk_id",
    "estimate_tokens",
    "get_formatter",
]
