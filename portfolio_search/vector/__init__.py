"""
Embedding generation, cosine ranking and the in-memory portfolio vector store.
"""

from .index import IVectorStore, PortfolioVectorStore
from .types import EmbeddedContent, SearchResult, CONTENT_TYPES
from .similarity import cosine_similarity, rank
from .embeddings import (
    IEmbeddingProvider,
    DeterministicHashEmbedding,
    SentenceTransformerEmbedding,
    OllamaEmbedding,
    OpenAIEmbedding,
    EmbeddingGenerator
)
from .corpus import build_content_corpus

__all__ = [
    'IVectorStore',
    'PortfolioVectorStore',
    'EmbeddedContent',
    'SearchResult',
    'CONTENT_TYPES',
    'cosine_similarity',
    'rank',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'OllamaEmbedding',
    'OpenAIEmbedding',
    'EmbeddingGenerator',
    'build_content_corpus'
]
