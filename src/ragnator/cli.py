"""Command-line entrypoint for the ragnator pipeline."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import load_config
from .driver import run_as_structured, run_as_text
from .errors import ConfigError
from .export import export_dataset
from .types import OutputFormat

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chunk documents into size-capped retrieval bundles")
    parser.add_argument("files", nargs="+", type=Path, help="PDF, EPUB or text files, processed in order")
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Bundle format: metadata text blocks or NDJSON records (default: txt)",
    )
    parser.add_argument("--out", type=Path, default=Path("."), help="Output directory (default: .)")
    parser.add_argument("--config", type=Path, default=None, help="Optional configuration YAML")
    parser.add_argument("--zip", action="store_true", help="Also write a zip archive of the dataset")
    parser.add_argument("--json", action="store_true", help="Emit a JSON summary of the run")
    parser.add_argument("--log-level", default="INFO", help="Python logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        config = load_config(args.config)
    except (ConfigError, TypeError, FileNotFoundError) as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 2

    runner = run_as_structured if args.format == OutputFormat.NDJSON.value else run_as_text
    result = runner(args.files, config=config)
    exported = export_dataset(result, args.out, archive=args.zip)

    if args.json:
        output: Dict[str, Any] = {
            "manifest": result.manifest.to_dict(),
            "documents": [doc.to_dict() for doc in result.documents],
            "dataset_dir": str(exported.root),
            "archive": str(exported.archive_path) if exported.archive_path else None,
        }
        print(json.dumps(output, indent=2))
    else:
        LOGGER.info(
            "Processed %d documents | failed=%d | bundles=%d | chunks=%d | out=%s",
            len(result.documents),
            len(result.failed),
            result.manifest.total_files,
            result.manifest.total_chunks_approx,
            exported.root,
        )
    return 1 if result.failed else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
