"""ragnator: page-aware streaming chunker and size-capped bundle packer."""

from .cancellation import CancellationToken
from .config import BundleConfig, ChunkerConfig, ExtractionConfig, RagnatorConfig, load_config
from .driver import run_as_structured, run_as_text, run_pipeline
from .types import ChunkRecord, DocumentStatus, OutputFormat, RunResult

__all__ = [
    "BundleConfig",
    "CancellationToken",
    "ChunkRecord",
    "ChunkerConfig",
    "DocumentStatus",
    "ExtractionConfig",
    "OutputFormat",
    "RagnatorConfig",
    "RunResult",
    "load_config",
    "run_as_structured",
    "run_as_text",
    "run_pipeline",
]
