"""
Cosine similarity and the ranking policy used by the vector store.
"""

from typing import List, Sequence, Tuple
import numpy as np

from ..core.errors import DimensionMismatchError
from .types import EmbeddedContent


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Raises DimensionMismatchError when the lengths differ. Returns 0.0 when
    either vector has zero norm.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    if vec_a.shape != vec_b.shape:
        raise DimensionMismatchError(expected=len(vec_a), actual=len(vec_b))

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def rank(query_vector: Sequence[float], items: Sequence[EmbeddedContent], top_k: int,
         min_score: float) -> List[Tuple[EmbeddedContent, float]]:
    """
    Score every item against the query, keep those with score >= min_score,
    sort descending and truncate to top_k.

    Equal scores keep their order from `items`.
    """
    scored = []
    for item in items:
        score = cosine_similarity(query_vector, item.embedding)
        if score >= min_score:
            scored.append((item, score))

    # sorted() is stable with reverse=True as well
    scored = sorted(scored, key=lambda pair: pair[1], reverse=True)
    return scored[:top_k]
