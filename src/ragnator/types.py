"""Public data structures shared across the ragnator pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class OutputFormat(str, Enum):
    """Wire representation selected once per run."""

    TEXT = "txt"
    NDJSON = "ndjson"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def folder_name(self) -> str:
        return "NDJSON" if self is OutputFormat.NDJSON else "TEXT_CHUNKS"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ChunkRecord:
    """Trimmed chunk text with its source document and attributed page."""

    content: str
    source: str
    page: int


@dataclass(slots=True)
class DocumentReport:
    """Outcome of processing one queued document."""

    name: str
    status: DocumentStatus = DocumentStatus.PENDING
    pages_read: int = 0
    pages_skipped: int = 0
    chunks_emitted: int = 0
    dropped_chunks: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["status"] = self.status.value
        return payload


@dataclass(slots=True)
class ProgressUpdate:
    """Progress notification passed to ``on_progress`` callbacks."""

    current: int
    total: int
    filename: str
    percent: int


@dataclass(slots=True)
class Manifest:
    """Summary over all sealed bundles of a run."""

    format: str
    total_files: int
    total_size_bytes: int
    total_chunks_approx: int
    created_at: str
    dataset_name: str = "RAGNATOR_EXPORT"
    generated_by: str = "ragnator"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class RunResult:
    """Aggregate output of a pipeline run."""

    format: OutputFormat
    bundles: List["SealedBundle"]
    manifest: Manifest
    documents: List[DocumentReport] = field(default_factory=list)
    cancelled: bool = False

    @property
    def failed(self) -> List[DocumentReport]:
        return [doc for doc in self.documents if doc.status is DocumentStatus.ERROR]


@dataclass(frozen=True, slots=True)
class SealedBundle:
    """A finished, named bundle of formatted records."""

    sequence: int
    name: str
    content: str
    size: int
    record_count: int
