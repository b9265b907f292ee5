"""
Embedding providers and the generator that turns portfolio text into vectors.

Providers are interchangeable behind IEmbeddingProvider; the generator adds
input validation and maps every provider failure to EmbeddingServiceError.
"""

from abc import ABC, abstractmethod
import hashlib
import math
import re
from typing import List, Optional

import numpy as np
import ollama
import requests
from sentence_transformers import SentenceTransformer

from ..core.errors import EmbeddingServiceError
from ..util.logging import logger

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    name = "abstract"

    @abstractmethod
    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hashed bag-of-words embeddings for tests and offline development.

    Every lower-cased token is hashed into one of `dimension` buckets with a
    hash-derived sign, then the vector is L2-normalised. Texts sharing words
    therefore score higher than unrelated texts, which keeps search results
    meaningful without an external model.
    """

    name = "hash"

    def __init__(self, dimension: int = 384):
        if dimension < 1:
            raise ValueError("dimension must be >= 1")
        self.dimension = dimension

    def embed_text(self, text: str) -> List[float]:
        """Generate deterministic embedding vector using hash function."""
        vector = np.zeros(self.dimension, dtype=np.float64)

        for token in _TOKEN_PATTERN.findall(text.lower()):
            digest = hashlib.md5(token.encode()).digest()
            bucket = int.from_bytes(digest[:4], "big") % self.dimension
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm

        return vector.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Local sentence-transformers model, loaded on first use."""

    name = "sentence_transformers"

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector using sentence transformers."""
        embedding = self.model.encode(text, convert_to_tensor=False)
        return embedding.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            self._dimension = len(self.embed_text("test"))
        return self._dimension


class OllamaEmbedding(IEmbeddingProvider):
    """Embeddings served by an Ollama instance."""

    name = "ollama"

    def __init__(self, model_name: str = "nomic-embed-text", host: Optional[str] = None, timeout: float = 30.0):
        self.model_name = model_name
        self.client = ollama.Client(host=host, timeout=timeout)
        self._dimension = None

    def embed_text(self, text: str) -> List[float]:
        response = self.client.embed(model=self.model_name, input=text)
        embeddings = response["embeddings"]
        if not embeddings:
            raise EmbeddingServiceError("Ollama returned no embeddings", provider=self.name)
        return list(embeddings[0])

    def get_dimension(self) -> int:
        if self._dimension is None:
            self._dimension = len(self.embed_text("test"))
        return self._dimension


class OpenAIEmbedding(IEmbeddingProvider):
    """Embeddings from an OpenAI-compatible /embeddings endpoint."""

    name = "openai"

    def __init__(self, api_key: str, model_name: str = "text-embedding-ada-002",
                 base_url: str = "https://api.openai.com/v1", timeout: float = 30.0):
        if not api_key:
            raise ValueError("OPENAI_API_KEY not found in environment")
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._dimension = None

    def embed_text(self, text: str) -> List[float]:
        response = requests.post(
            f"{self.base_url}/embeddings",
            json={"model": self.model_name, "input": text},
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json().get("data") or []
        if not data or "embedding" not in data[0]:
            raise EmbeddingServiceError("Malformed embedding response", provider=self.name)
        return data[0]["embedding"]

    def get_dimension(self) -> int:
        if self._dimension is None:
            self._dimension = len(self.embed_text("test"))
        return self._dimension


class EmbeddingGenerator:
    """
    Turns free text into embedding vectors via the configured provider.

    Empty text is a caller error and raises ValueError before any provider
    call. Any provider failure, or a response that is not a non-empty list of
    finite numbers, raises EmbeddingServiceError. There is no retry.
    """

    def __init__(self, provider: Optional[IEmbeddingProvider] = None):
        """
        Args:
            provider: Embedding provider to use, defaults to config setting
        """
        self._provider = provider

    @property
    def provider(self) -> IEmbeddingProvider:
        """Lazy-loaded embedding provider."""
        if self._provider is None:
            from ..core.config import get_embedding_provider
            self._provider = get_embedding_provider()
        return self._provider

    @property
    def provider_name(self) -> str:
        return getattr(self.provider, "name", type(self.provider).__name__)

    def embed(self, text: str) -> List[float]:
        """
        Embed a single text.

        Args:
            text: Text to embed, must be non-empty after trimming

        Returns:
            The embedding vector as a list of floats
        """
        if text is None or not text.strip():
            raise ValueError("Cannot embed empty text")

        try:
            vector = self.provider.embed_text(text)
        except EmbeddingServiceError:
            raise
        except Exception as e:
            logger.log_operation("embedding.generate", "failed", {"provider": self.provider_name, "error": str(e)})
            raise EmbeddingServiceError(f"Failed to generate embedding: {e}", provider=self.provider_name) from e

        return self._validate(vector)

    def _validate(self, vector) -> List[float]:
        try:
            values = [float(v) for v in vector]
        except (TypeError, ValueError) as e:
            raise EmbeddingServiceError("Embedding response is not numeric", provider=self.provider_name) from e

        if not values:
            raise EmbeddingServiceError("Embedding response is empty", provider=self.provider_name)
        if not all(math.isfinite(v) for v in values):
            raise EmbeddingServiceError("Embedding response contains non-finite values", provider=self.provider_name)
        return values
