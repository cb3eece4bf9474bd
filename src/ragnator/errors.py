"""Exception types raised by the ragnator pipeline."""

from __future__ import annotations


class RagnatorError(RuntimeError):
    """Base class for pipeline failures."""


class ConfigError(ValueError):
    """Raised when configuration values are inconsistent."""


class UnsupportedFormatError(RagnatorError):
    """Raised when an input file has no extraction route."""


class ExtractionError(RagnatorError):
    """Raised when a whole document cannot be opened or read."""


class PipelineCancelled(RagnatorError):
    """Raised internally when a run is cancelled through its token."""
