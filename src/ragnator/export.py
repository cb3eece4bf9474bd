"""Write sealed bundles and the dataset manifest to disk."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .types import RunResult

logger = logging.getLogger(__name__)

MANIFEST_NAME = "dataset_summary.json"


@dataclass
class ExportResult:
    root: Path
    bundle_paths: List[Path] = field(default_factory=list)
    manifest_path: Optional[Path] = None
    archive_path: Optional[Path] = None


def export_dataset(result: RunResult, out_dir: Path, *, archive: bool = False) -> ExportResult:
    """Lay out ``RAGNATOR_DATASET_<date>/<format folder>/`` under ``out_dir``."""

    date = result.manifest.created_at[:10]
    root = Path(out_dir) / f"RAGNATOR_DATASET_{date}"
    data_dir = root / result.format.folder_name
    data_dir.mkdir(parents=True, exist_ok=True)

    exported = ExportResult(root=root)
    for bundle in result.bundles:
        target = data_dir / bundle.name
        target.write_text(bundle.content, encoding="utf-8", newline="")
        exported.bundle_paths.append(target)

    exported.manifest_path = root / MANIFEST_NAME
    exported.manifest_path.write_text(
        json.dumps(result.manifest.to_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    if archive:
        base = Path(out_dir) / f"RAGNATOR_{result.format.value.upper()}_DATASET"
        exported.archive_path = Path(
            shutil.make_archive(str(base), "zip", root_dir=root.parent, base_dir=root.name)
        )
        logger.info("Wrote archive %s", exported.archive_path)
    logger.info("Exported %d bundles to %s", len(exported.bundle_paths), data_dir)
    return exported
