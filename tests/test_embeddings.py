"""
Test cases for embedding providers and the embedding generator.
"""

import pytest
import numpy as np
from unittest.mock import MagicMock, patch

import requests

from portfolio_search.core.errors import EmbeddingServiceError
from portfolio_search.vector.embeddings import (
    IEmbeddingProvider,
    DeterministicHashEmbedding,
    SentenceTransformerEmbedding,
    OllamaEmbedding,
    OpenAIEmbedding,
    EmbeddingGenerator,
)
from portfolio_search.vector.similarity import cosine_similarity


def test_embedding_interface():
    """Test that the hash provider implements the interface correctly."""
    embedder = DeterministicHashEmbedding(dimension=384)

    assert isinstance(embedder, IEmbeddingProvider)
    assert embedder.get_dimension() == 384


def test_deterministic_embedding():
    """Test that the same input always produces the same output."""
    embedder1 = DeterministicHashEmbedding(dimension=128)
    embedder2 = DeterministicHashEmbedding(dimension=128)

    text = "React portfolio site"
    assert embedder1.embed_text(text) == embedder2.embed_text(text)
    assert len(embedder1.embed_text(text)) == 128


def test_hash_embedding_is_normalized():
    """Test that non-empty text produces a unit vector."""
    vector = DeterministicHashEmbedding(dimension=64).embed_text("Python machine learning")
    assert np.linalg.norm(vector) == pytest.approx(1.0)


def test_hash_embedding_rewards_shared_words():
    """Test that texts sharing words score higher than unrelated texts."""
    embedder = DeterministicHashEmbedding(dimension=384)

    query = embedder.embed_text("React TypeScript projects")
    related = embedder.embed_text("Project built with React and TypeScript")
    unrelated = embedder.embed_text("Contact information and availability")

    assert cosine_similarity(query, related) > cosine_similarity(query, unrelated)


def test_hash_embedding_rejects_invalid_dimension():
    with pytest.raises(ValueError):
        DeterministicHashEmbedding(dimension=0)


def test_sentence_transformer_provider_uses_model():
    """Test that the model is loaded lazily and its output converted to a list."""
    with patch('portfolio_search.vector.embeddings.SentenceTransformer') as mock_model_cls:
        mock_model_cls.return_value.encode.return_value = np.array([0.1, 0.2, 0.3])

        provider = SentenceTransformerEmbedding("test-model")
        mock_model_cls.assert_not_called()

        assert provider.embed_text("hello") == pytest.approx([0.1, 0.2, 0.3])
        assert provider.get_dimension() == 3
        mock_model_cls.assert_called_once_with("test-model")


def test_ollama_provider_returns_first_embedding():
    """Test that the Ollama provider unwraps the embed response."""
    with patch('portfolio_search.vector.embeddings.ollama.Client') as mock_client_cls:
        mock_client_cls.return_value.embed.return_value = {"embeddings": [[0.5, 0.25]]}

        provider = OllamaEmbedding("nomic-embed-text", host="http://ollama:11434", timeout=5)

        assert provider.embed_text("hello") == [0.5, 0.25]
        mock_client_cls.assert_called_once_with(host="http://ollama:11434", timeout=5)
        mock_client_cls.return_value.embed.assert_called_once_with(model="nomic-embed-text", input="hello")


def test_ollama_provider_empty_response_is_service_error():
    with patch('portfolio_search.vector.embeddings.ollama.Client') as mock_client_cls:
        mock_client_cls.return_value.embed.return_value = {"embeddings": []}

        provider = OllamaEmbedding()
        with pytest.raises(EmbeddingServiceError):
            provider.embed_text("hello")


def test_openai_provider_posts_request():
    """Test the OpenAI-compatible request and response handling."""
    response = MagicMock()
    response.json.return_value = {"data": [{"embedding": [0.1, 0.9]}]}

    with patch('portfolio_search.vector.embeddings.requests.post', return_value=response) as mock_post:
        provider = OpenAIEmbedding("sk-test", base_url="https://api.example.com/v1/", timeout=7)
        assert provider.embed_text("hello") == [0.1, 0.9]

    args, kwargs = mock_post.call_args
    assert args[0] == "https://api.example.com/v1/embeddings"
    assert kwargs["json"] == {"model": "text-embedding-ada-002", "input": "hello"}
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["timeout"] == 7


def test_openai_provider_requires_api_key():
    with pytest.raises(ValueError):
        OpenAIEmbedding("")


class TestEmbeddingGenerator:
    """Test cases for EmbeddingGenerator."""

    def test_embed_returns_floats(self):
        provider = MagicMock()
        provider.embed_text.return_value = [1, 0, 2]

        generator = EmbeddingGenerator(provider)
        assert generator.embed("some text") == [1.0, 0.0, 2.0]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_text_fails_fast(self, text):
        """Test that empty text never reaches the provider."""
        provider = MagicMock()
        generator = EmbeddingGenerator(provider)

        with pytest.raises(ValueError):
            generator.embed(text)
        provider.embed_text.assert_not_called()

    def test_provider_failure_becomes_service_error(self):
        provider = MagicMock()
        provider.name = "stub"
        provider.embed_text.side_effect = ConnectionError("connection refused")

        generator = EmbeddingGenerator(provider)
        with pytest.raises(EmbeddingServiceError) as exc_info:
            generator.embed("hello")

        assert exc_info.value.provider == "stub"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_http_error_becomes_service_error(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("429 Too Many Requests")

        with patch('portfolio_search.vector.embeddings.requests.post', return_value=response):
            generator = EmbeddingGenerator(OpenAIEmbedding("sk-test"))
            with pytest.raises(EmbeddingServiceError):
                generator.embed("hello")

    def test_no_retry_on_failure(self):
        provider = MagicMock()
        provider.embed_text.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(EmbeddingServiceError):
            EmbeddingGenerator(provider).embed("hello")
        assert provider.embed_text.call_count == 1

    @pytest.mark.parametrize("bad_response", [[], ["a", "b"], [float("nan"), 1.0], None])
    def test_malformed_response_is_service_error(self, bad_response):
        provider = MagicMock()
        provider.embed_text.return_value = bad_response

        with pytest.raises(EmbeddingServiceError):
            EmbeddingGenerator(provider).embed("hello")

    def test_provider_defaults_to_config(self):
        """Test that the provider is resolved lazily from configuration."""
        with patch('portfolio_search.core.config.EMBED_PROVIDER', 'hash'), \
             patch('portfolio_search.core.config.EMBED_DIMENSION', 32):
            generator = EmbeddingGenerator()
            assert generator.provider_name == "hash"
            assert len(generator.embed("hello world")) == 32


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
