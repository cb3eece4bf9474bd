"""Byte-budgeted packing of formatted records into bundles."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..config import BundleConfig
from ..logging_utils import log_event
from ..serialize.formatter import FormattedUnit
from ..types import OutputFormat, SealedBundle

logger = logging.getLogger(__name__)


def bundle_name(base_name: str, sequence: int, output_format: OutputFormat) -> str:
    return f"{base_name}_PART_{sequence:03d}.{output_format.extension}"


class BundlePacker:
    """Accumulate formatted units and seal a bundle before it would overflow.

    A unit is never split. One that does not fit starts the next bundle, so a
    single unit larger than ``max_bundle_size`` ends up alone in its bundle.
    Bundles are shared across every document of a run.
    """

    def __init__(self, output_format: OutputFormat | str, config: Optional[BundleConfig] = None) -> None:
        self.output_format = OutputFormat(output_format)
        self.config = config or BundleConfig()
        self.sealed: List[SealedBundle] = []
        self._sequence = 1
        self._parts: List[str] = []
        self._size = 0
        self._count = 0

    @property
    def current_size(self) -> int:
        return self._size

    @property
    def current_count(self) -> int:
        return self._count

    @property
    def total_records(self) -> int:
        """Units added so far across sealed bundles and the open one."""

        return sum(bundle.record_count for bundle in self.sealed) + self._count

    def add(self, unit: FormattedUnit) -> Optional[SealedBundle]:
        """Append ``unit``; return the bundle sealed to make room, if any."""

        sealed: Optional[SealedBundle] = None
        if self._count and self._size + unit.size > self.config.max_bundle_size:
            sealed = self._seal()
        self._parts.append(unit.text)
        self._size += unit.size
        self._count += 1
        return sealed

    def finish(self) -> Optional[SealedBundle]:
        """Seal the trailing bundle if it holds anything."""

        if not self._count:
            return None
        return self._seal()

    def _seal(self) -> SealedBundle:
        bundle = SealedBundle(
            sequence=self._sequence,
            name=bundle_name(self.config.base_name, self._sequence, self.output_format),
            content="".join(self._parts),
            size=self._size,
            record_count=self._count,
        )
        self.sealed.append(bundle)
        log_event(
            "bundle_sealed",
            name=bundle.name,
            size_mb=round(bundle.size / 1024 / 1024, 2),
            records=bundle.record_count,
        )
        self._sequence += 1
        self._parts = []
        self._size = 0
        self._count = 0
        return bundle
