"""
In-memory vector store over the embedded portfolio corpus.

The store starts uninitialized and builds its corpus on first use. Writes are
serialized behind one lock; the collection itself is an immutable tuple that
writers swap out whole, so readers always scan a consistent snapshot.
"""

from abc import ABC, abstractmethod
from collections import Counter
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from ..content.loader import ContentSource
from ..core.errors import DimensionMismatchError, EmbeddingServiceError, InitializationTimeoutError
from ..util.logging import logger
from .corpus import build_content_corpus
from .embeddings import EmbeddingGenerator
from .similarity import rank
from .types import EmbeddedContent, SearchResult


class IVectorStore(ABC):
    """Abstract interface for portfolio vector storage operations."""

    @abstractmethod
    def initialize(self, data: Optional[List[EmbeddedContent]] = None, timeout: Optional[float] = None) -> None:
        """Populate the store, building the corpus when no data is supplied."""
        pass

    @abstractmethod
    def search(self, query: str, top_k: int = 5, min_score: float = 0.7, timeout: Optional[float] = None) -> List[SearchResult]:
        """Search for content similar to the query and return ranked results."""
        pass

    @abstractmethod
    def get_embeddings_by_type(self, content_type: str) -> List[EmbeddedContent]:
        """Return stored entries of one type."""
        pass

    @abstractmethod
    def get_all_embeddings(self) -> List[EmbeddedContent]:
        """Return every stored entry."""
        pass

    @abstractmethod
    def add_embedding(self, item: EmbeddedContent) -> None:
        """Add or replace a single entry."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all entries and return to the uninitialized state."""
        pass


class PortfolioVectorStore(IVectorStore):
    """In-memory store answering top-K cosine similarity queries."""

    def __init__(self, generator: Optional[EmbeddingGenerator] = None, source: Optional[ContentSource] = None,
                 max_workers: int = 4):
        """
        Args:
            generator: Embedding generator for corpus and queries, defaults to config setting
            source: Content source for corpus builds, defaults to config setting
            max_workers: Concurrent embedding calls during a corpus build
        """
        self.generator = generator if generator is not None else EmbeddingGenerator()
        self._source = source
        self.max_workers = max_workers

        self._embeddings: Tuple[EmbeddedContent, ...] = ()
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def source(self) -> ContentSource:
        """Lazy-loaded content source."""
        if self._source is None:
            from ..core.config import get_content_source
            self._source = get_content_source()
        return self._source

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def dimension(self) -> Optional[int]:
        snapshot = self._embeddings
        return snapshot[0].dimension if snapshot else None

    def __len__(self) -> int:
        return len(self._embeddings)

    def _acquire(self, timeout: Optional[float]) -> None:
        acquired = self._lock.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            logger.log_operation("vector.initialize", "timeout", {"timeout_sec": timeout})
            raise InitializationTimeoutError(f"Timed out after {timeout}s waiting for store initialization")

    @staticmethod
    def _validated(data: Iterable[EmbeddedContent]) -> Tuple[EmbeddedContent, ...]:
        """Collapse duplicate ids (last wins, first position kept) and check dimensions."""
        positions: Dict[str, int] = {}
        collection: List[EmbeddedContent] = []
        dimension = None

        for item in data:
            if not isinstance(item, EmbeddedContent):
                raise TypeError(f"Expected EmbeddedContent, got {type(item).__name__}")
            if dimension is None:
                dimension = item.dimension
            elif item.dimension != dimension:
                raise DimensionMismatchError(expected=dimension, actual=item.dimension)

            if item.id in positions:
                collection[positions[item.id]] = item
            else:
                positions[item.id] = len(collection)
                collection.append(item)

        return tuple(collection)

    def initialize(self, data: Optional[List[EmbeddedContent]] = None, timeout: Optional[float] = None) -> None:
        """
        Populate the store.

        With `data`, the supplied entries become the collection. Without it,
        an uninitialized store builds the portfolio corpus, and an initialized
        store returns immediately. Only one build runs at a time; concurrent
        callers wait for it and then find the store initialized. A failed
        build leaves the store uninitialized so the next call retries.

        Args:
            data: Pre-computed entries to store directly
            timeout: Seconds to wait for another caller's initialization
        """
        if data is None and self._initialized:
            return

        self._acquire(timeout)
        try:
            if data is not None:
                self._embeddings = self._validated(data)
                self._initialized = True
                logger.log_operation("vector.initialize", "success", {"source": "supplied", "count": len(self._embeddings)})
                return

            if self._initialized:
                return

            corpus = build_content_corpus(self.generator, self.source, self.max_workers)
            self._embeddings = self._validated(corpus)
            self._initialized = True
            logger.log_operation("vector.initialize", "success", {"source": "corpus", "count": len(self._embeddings)})
        finally:
            self._lock.release()

    def search(self, query: str, top_k: int = 5, min_score: float = 0.7, timeout: Optional[float] = None) -> List[SearchResult]:
        """
        Rank stored content against a query.

        Initializes the store on first use; corpus build errors propagate. A
        failure to embed the query is masked and yields an empty list.

        Args:
            query: Free-text query
            top_k: Maximum number of results, at least 1
            min_score: Minimum cosine similarity for a result
            timeout: Seconds to wait for initialization

        Returns:
            SearchResults sorted by score descending
        """
        if top_k < 1:
            raise ValueError("top_k must be >= 1")

        if not self._initialized:
            self.initialize(timeout=timeout)

        try:
            query_vector = self.generator.embed(query)
        except (EmbeddingServiceError, ValueError) as e:
            logger.log_search(query, 0, top_k, min_score, status="masked", details={"error": str(e)})
            return []

        snapshot = self._embeddings
        ranked = rank(query_vector, snapshot, top_k, min_score)
        results = [SearchResult.from_content(item, score) for item, score in ranked]

        logger.log_search(query, len(results), top_k, min_score, details={"scanned": len(snapshot)})
        return results

    def get_embeddings_by_type(self, content_type: str) -> List[EmbeddedContent]:
        return [item for item in self._embeddings if item.type == content_type]

    def get_all_embeddings(self) -> List[EmbeddedContent]:
        """Current collection. Entries are shared with the store; do not mutate them."""
        return list(self._embeddings)

    def add_embedding(self, item: EmbeddedContent) -> None:
        """
        Add an entry, replacing any stored entry with the same id in place.

        Raises DimensionMismatchError if the embedding length differs from the
        stored entries. The lifecycle state is unchanged; a later corpus build
        on an uninitialized store replaces the collection.
        """
        if not isinstance(item, EmbeddedContent):
            raise TypeError(f"Expected EmbeddedContent, got {type(item).__name__}")

        self._acquire(None)
        try:
            current = self._embeddings
            if current and current[0].dimension != item.dimension:
                raise DimensionMismatchError(expected=current[0].dimension, actual=item.dimension)

            replaced = False
            updated = []
            for existing in current:
                if existing.id == item.id:
                    updated.append(item)
                    replaced = True
                else:
                    updated.append(existing)
            if not replaced:
                updated.append(item)

            self._embeddings = tuple(updated)
        finally:
            self._lock.release()

        logger.log_vector_operation("add", item.id, {"type": item.type, "replaced": replaced})

    def clear(self) -> None:
        self._acquire(None)
        try:
            self._embeddings = ()
            self._initialized = False
        finally:
            self._lock.release()

        logger.log_operation("vector.clear", "success")

    def stats(self) -> Dict[str, int]:
        """Entry count per content type."""
        return dict(Counter(item.type for item in self._embeddings))
