"""High-level orchestration of the extraction, chunking and packing stages."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .cancellation import CancellationToken
from .chunking.stream import StreamChunker
from .config import RagnatorConfig, load_config
from .errors import PipelineCancelled, RagnatorError
from .extract.extractor import DocumentExtractor, FitzExtractor
from .logging_utils import log_event
from .packing.manifest import build_manifest
from .packing.packer import BundlePacker
from .serialize.formatter import ChunkFormatter, Clock, get_formatter
from .types import (
    ChunkRecord,
    DocumentReport,
    DocumentStatus,
    OutputFormat,
    ProgressUpdate,
    RunResult,
)

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], None]


def run_pipeline(
    file_paths: Sequence[str | Path],
    output_format: OutputFormat | str,
    *,
    config: RagnatorConfig | None = None,
    extractor: DocumentExtractor | None = None,
    formatter: ChunkFormatter | None = None,
    cancel_token: CancellationToken | None = None,
    on_progress: ProgressCallback | None = None,
    clock: Clock | None = None,
) -> RunResult:
    """Process ``file_paths`` one at a time into a single bundle sequence.

    A failing document is marked ``error`` and the queue moves on; a cancelled
    run keeps whatever was packed so far and leaves unstarted documents
    ``pending``.
    """

    cfg = config or load_config()
    fmt = OutputFormat(output_format)
    extractor = extractor or FitzExtractor(cfg.extraction)
    formatter = formatter or get_formatter(fmt, clock=clock)
    token = cancel_token or CancellationToken()
    packer = BundlePacker(fmt, cfg.bundles)

    reports = [DocumentReport(name=Path(raw).name or str(raw)) for raw in file_paths]
    cancelled = False
    log_event("run_started", format=fmt.value, documents=len(reports))

    for position, (raw_path, report) in enumerate(zip(file_paths, reports), start=1):
        if token.cancelled:
            cancelled = True
            break
        report.status = DocumentStatus.PROCESSING
        log_event("document_started", document=report.name, position=position, total=len(reports))
        try:
            _process_document(
                Path(raw_path),
                report,
                config=cfg,
                extractor=extractor,
                formatter=formatter,
                packer=packer,
                token=token,
                progress=_progress_reporter(on_progress, position, len(reports), report.name),
            )
        except PipelineCancelled:
            report.status = DocumentStatus.CANCELLED
            cancelled = True
            break
        except (RagnatorError, OSError) as exc:
            LOGGER.error("Failed to process %s: %s", raw_path, exc)
            _mark_error(report, exc)
            continue
        except Exception as exc:
            LOGGER.exception("Unexpected failure while processing %s", raw_path)
            _mark_error(report, exc)
            continue
        report.status = DocumentStatus.DONE
        log_event(
            "document_done",
            document=report.name,
            pages=report.pages_read,
            chunks=report.chunks_emitted,
            dropped=report.dropped_chunks,
        )

    if cancelled:
        log_event("run_cancelled", processed=sum(1 for r in reports if r.status is DocumentStatus.DONE))
    packer.finish()
    manifest = build_manifest(packer.sealed, fmt, clock=clock)
    log_event(
        "run_completed",
        format=fmt.value,
        bundles=manifest.total_files,
        size_bytes=manifest.total_size_bytes,
        chunks=manifest.total_chunks_approx,
        failed=sum(1 for r in reports if r.status is DocumentStatus.ERROR),
    )
    return RunResult(format=fmt, bundles=list(packer.sealed), manifest=manifest, documents=reports, cancelled=cancelled)


def run_as_text(file_paths: Sequence[str | Path], **kwargs) -> RunResult:
    """Run the pipeline emitting plain-text metadata blocks."""

    return run_pipeline(file_paths, OutputFormat.TEXT, **kwargs)


def run_as_structured(file_paths: Sequence[str | Path], **kwargs) -> RunResult:
    """Run the pipeline emitting NDJSON records."""

    return run_pipeline(file_paths, OutputFormat.NDJSON, **kwargs)


def _process_document(
    path: Path,
    report: DocumentReport,
    *,
    config: RagnatorConfig,
    extractor: DocumentExtractor,
    formatter: ChunkFormatter,
    packer: BundlePacker,
    token: CancellationToken,
    progress: Callable[[int, int], None],
) -> None:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    chunker = StreamChunker(report.name, config.chunker)
    every = config.extraction.progress_every

    def pack(records: List[ChunkRecord]) -> None:
        for record in records:
            packer.add(formatter.render(record, packer.total_records))
            report.chunks_emitted += 1

    for segment in extractor.iter_pages(path):
        token.raise_if_cancelled()
        if segment.error is not None:
            report.pages_skipped += 1
            log_event("page_skipped", document=report.name, page=segment.page_number, error=segment.error)
            continue
        report.pages_read += 1
        pack(chunker.process_text(segment.text))
        if segment.page_number % every == 0:
            progress(segment.page_number, segment.page_count)

    pack(chunker.flush())
    report.dropped_chunks = chunker.dropped
    progress(1, 1)


def _progress_reporter(
    callback: Optional[ProgressCallback],
    position: int,
    total: int,
    filename: str,
) -> Callable[[int, int], None]:
    def report(done: int, of: int) -> None:
        if callback is None:
            return
        percent = int(math.floor(done / of * 100 + 0.5)) if of else 100
        callback(ProgressUpdate(current=position, total=total, filename=filename, percent=percent))

    return report


def _mark_error(report: DocumentReport, exc: BaseException) -> None:
    report.status = DocumentStatus.ERROR
    report.error = str(exc) or exc.__class__.__name__
    log_event("document_error", document=report.name, error=report.error)
