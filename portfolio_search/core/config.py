"""
Configuration for the portfolio search service, read from the environment.

A .env file in the working directory is loaded first; real environment
variables take precedence.
"""

import os
from typing import Any, Dict, List

from dotenv import load_dotenv

load_dotenv()

# Debug flag
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Embedding configuration
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformers|ollama|openai
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "")  # empty means the provider default
EMBED_DIMENSION = int(os.getenv("EMBED_DIMENSION", "384"))  # hash provider only
EMBED_TIMEOUT_SEC = float(os.getenv("EMBED_TIMEOUT_SEC", "30"))
CORPUS_BUILD_WORKERS = int(os.getenv("CORPUS_BUILD_WORKERS", "4"))

# Hosted model endpoints
OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")

# Content
CONTENT_DIR = os.getenv("CONTENT_DIR", "./content")
PORTFOLIO_OWNER = os.getenv("PORTFOLIO_OWNER", "Alex Chen")
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", "hello@example.com")

# Search defaults used by the chat layer
SEARCH_TOP_K = int(os.getenv("SEARCH_TOP_K", "5"))
SEARCH_MIN_SCORE = float(os.getenv("SEARCH_MIN_SCORE", "0.6"))

# Chat configuration
CHAT_ENABLED = os.getenv("CHAT_ENABLED", "true").lower() == "true"
CHAT_HISTORY_LIMIT = int(os.getenv("CHAT_HISTORY_LIMIT", "6"))
CHAT_TIMEOUT_SEC = float(os.getenv("CHAT_TIMEOUT_SEC", "60"))

# Rate limiting for the chat API
RATE_LIMIT_WINDOW_SEC = int(os.getenv("RATE_LIMIT_WINDOW_SEC", "300"))  # 5 minutes
RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "20"))

# Version string
VERSION = "1.0.0"

EMBED_PROVIDERS = ["hash", "sentence_transformers", "ollama", "openai"]


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    if EMBED_PROVIDER == "sentence_transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(EMBED_MODEL_NAME or "all-MiniLM-L6-v2")
    elif EMBED_PROVIDER == "ollama":
        from ..vector.embeddings import OllamaEmbedding
        return OllamaEmbedding(EMBED_MODEL_NAME or "nomic-embed-text", host=OLLAMA_HOST, timeout=EMBED_TIMEOUT_SEC)
    elif EMBED_PROVIDER == "openai":
        from ..vector.embeddings import OpenAIEmbedding
        return OpenAIEmbedding(
            OPENAI_API_KEY,
            model_name=EMBED_MODEL_NAME or "text-embedding-ada-002",
            base_url=OPENAI_BASE_URL,
            timeout=EMBED_TIMEOUT_SEC,
        )
    else:
        from ..vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(EMBED_DIMENSION)


def get_content_source():
    """Get the content source backed by CONTENT_DIR."""
    from ..content.loader import FileContentSource
    return FileContentSource(CONTENT_DIR, owner=PORTFOLIO_OWNER, contact_email=CONTACT_EMAIL)


def get_vector_store():
    """Build a new, uninitialized vector store from configuration."""
    from ..vector.embeddings import EmbeddingGenerator
    from ..vector.index import PortfolioVectorStore
    return PortfolioVectorStore(
        generator=EmbeddingGenerator(get_embedding_provider()),
        source=get_content_source(),
        max_workers=CORPUS_BUILD_WORKERS,
    )


def validate_config() -> List[str]:
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in EMBED_PROVIDERS:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if EMBED_PROVIDER == "openai" and not OPENAI_API_KEY:
        issues.append("EMBED_PROVIDER=openai requires OPENAI_API_KEY")

    if EMBED_DIMENSION < 1:
        issues.append("EMBED_DIMENSION must be >= 1")

    if CORPUS_BUILD_WORKERS < 1:
        issues.append("CORPUS_BUILD_WORKERS must be >= 1")

    if SEARCH_TOP_K < 1:
        issues.append("SEARCH_TOP_K must be >= 1")

    if not -1.0 <= SEARCH_MIN_SCORE <= 1.0:
        issues.append("SEARCH_MIN_SCORE must be within [-1, 1]")

    if RATE_LIMIT_WINDOW_SEC < 1 or RATE_LIMIT_MAX_REQUESTS < 1:
        issues.append("RATE_LIMIT_WINDOW_SEC and RATE_LIMIT_MAX_REQUESTS must be >= 1")

    return issues


def config_summary() -> Dict[str, Any]:
    """Current settings with secrets redacted, for diagnostics."""
    from ..util.logging import sanitize_payload
    return sanitize_payload({
        "debug": DEBUG,
        "embed_provider": EMBED_PROVIDER,
        "embed_model_name": EMBED_MODEL_NAME,
        "ollama_host": OLLAMA_HOST,
        "ollama_model": OLLAMA_MODEL,
        "api_key": OPENAI_API_KEY,
        "content_dir": CONTENT_DIR,
        "search_top_k": SEARCH_TOP_K,
        "search_min_score": SEARCH_MIN_SCORE,
        "chat_enabled": CHAT_ENABLED,
        "version": VERSION,
    })
