from .extractor import DocumentExtractor, FitzExtractor, PageSegment

__all__ = ["DocumentExtractor", "FitzExtractor", "PageSegment"]
