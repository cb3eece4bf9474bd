from __future__ import annotations

import threading

from .errors import PipelineCancelled


class CancellationToken:
    """Thread-safe flag checked by the driver between documents and pages."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise PipelineCancelled("Run cancelled")
