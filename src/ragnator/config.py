"""Configuration primitives for the ragnator pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import ConfigError

MAX_BUNDLE_SIZE = int(38.5 * 1024 * 1024)


@dataclass(slots=True)
class ChunkerConfig:
    """Configuration for the streaming chunker."""

    target_size: int = 1500
    overlap_window: int = 200
    search_radius: int = 100
    min_chunk_chars: int = 20

    def validate(self) -> None:
        if self.target_size <= 0:
            raise ConfigError("chunker.target_size must be positive")
        if self.overlap_window < 0 or self.search_radius < 0 or self.min_chunk_chars < 0:
            raise ConfigError("chunker overlap, radius and minimum length must be non-negative")
        # A cut can land as early as target_size - search_radius; the retained
        # tail must still be shorter than that or the buffer never shrinks.
        if self.overlap_window >= self.target_size - self.search_radius:
            raise ConfigError("chunker.overlap_window must be < target_size - search_radius")


@dataclass(slots=True)
class BundleConfig:
    """Configuration for size-capped bundle packing."""

    max_bundle_size: int = MAX_BUNDLE_SIZE
    base_name: str = "RAGNATOR"

    def validate(self) -> None:
        if self.max_bundle_size <= 0:
            raise ConfigError("bundles.max_bundle_size must be positive")
        if not self.base_name:
            raise ConfigError("bundles.base_name must not be empty")


@dataclass(slots=True)
class ExtractionConfig:
    """Configuration for the document extraction adapter."""

    progress_every: int = 5
    supported_suffixes: Tuple[str, ...] = (".pdf", ".epub", ".txt")

    def validate(self) -> None:
        if self.progress_every <= 0:
            raise ConfigError("extraction.progress_every must be positive")


@dataclass(slots=True)
class RagnatorConfig:
    """Top-level configuration object."""

    chunker: ChunkerConfig = field(default_factory=ChunkerConfig)
    bundles: BundleConfig = field(default_factory=BundleConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RagnatorConfig":
        """Build a :class:`RagnatorConfig` from a nested mapping."""

        def build(name: str, typ: Any) -> Any:
            section = data.get(name) or {}
            return typ(**dict(section))

        extraction = build("extraction", ExtractionConfig)
        extraction.supported_suffixes = tuple(s.lower() for s in extraction.supported_suffixes)
        config = cls(
            chunker=build("chunker", ChunkerConfig),
            bundles=build("bundles", BundleConfig),
            extraction=extraction,
        )
        config.validate()
        return config

    def validate(self) -> None:
        self.chunker.validate()
        self.bundles.validate()
        self.extraction.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration into a serialisable mapping."""

        return {
            "chunker": {
                "target_size": self.chunker.target_size,
                "overlap_window": self.chunker.overlap_window,
                "search_radius": self.chunker.search_radius,
                "min_chunk_chars": self.chunker.min_chunk_chars,
            },
            "bundles": {
                "max_bundle_size": self.bundles.max_bundle_size,
                "base_name": self.bundles.base_name,
            },
            "extraction": {
                "progress_every": self.extraction.progress_every,
                "supported_suffixes": list(self.extraction.supported_suffixes),
            },
        }


def load_config(path: Optional[Path | str] = None) -> RagnatorConfig:
    """Load configuration from YAML, defaulting to the bundled defaults."""

    if path is None:
        base = Path(__file__).resolve()
        candidates = [
            base.parent.parent.parent / "configs" / "ragnator.yaml",
            base.parent.parent / "configs" / "ragnator.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break
        else:
            return RagnatorConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration YAML must produce a mapping")
    return RagnatorConfig.from_dict(data)
