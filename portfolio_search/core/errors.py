"""
Error taxonomy for embedding, corpus construction and similarity search.
"""

from typing import Optional


class PortfolioSearchError(Exception):
    """Base class for all portfolio search errors."""


class EmbeddingServiceError(PortfolioSearchError):
    """The embedding service call failed (network, auth, quota, malformed response)."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class CorpusConstructionError(PortfolioSearchError):
    """Building the full portfolio corpus failed; nothing was stored."""


class ContentLoadError(PortfolioSearchError):
    """A content file could not be read."""


class DimensionMismatchError(PortfolioSearchError, ValueError):
    """Two vectors that must share a length do not."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Vector dimension {actual} does not match expected dimension {expected}")
        self.expected = expected
        self.actual = actual


class InitializationTimeoutError(PortfolioSearchError, TimeoutError):
    """Gave up waiting for another caller's store initialization."""
