"""Run-level manifest derived from sealed bundles."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..logging_utils import utc_now
from ..types import Manifest, OutputFormat, SealedBundle


def build_manifest(
    bundles: Sequence[SealedBundle],
    output_format: OutputFormat | str,
    *,
    clock: Optional[Callable] = None,
) -> Manifest:
    now = (clock or utc_now)()
    return Manifest(
        format=OutputFormat(output_format).value,
        total_files=len(bundles),
        total_size_bytes=sum(bundle.size for bundle in bundles),
        total_chunks_approx=sum(bundle.record_count for bundle in bundles),
        created_at=now.isoformat(),
    )
