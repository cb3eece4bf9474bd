"""Per-document page attribution state."""

from __future__ import annotations

from typing import Optional


class PageTracker:
    """Remember the page number most recently announced by a sentinel.

    Chunks read :attr:`current` at the moment they are cut, so a chunk whose
    text straddles a page break is attributed to the later page.
    """

    __slots__ = ("current",)

    def __init__(self, first_page: int = 1) -> None:
        self.current = first_page

    def observe(self, page: Optional[int]) -> int:
        if page is not None:
            self.current = page
        return self.current
