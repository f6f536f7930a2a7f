"""Content similarity via cosine similarity of embedding vectors."""

import logging
from typing import Optional

import numpy as np

from .base import SimilarityOracle, SimilarityVerdict
from ..store import CorpusStore

logger = logging.getLogger(__name__)


def normalize_vector(vector) -> np.ndarray:
    """Scale a vector to unit length (zero vectors are returned unchanged)."""
    vec = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(vec)
    if norm == 0:
        return vec
    return vec / norm


class EmbeddingSimilarityOracle(SimilarityOracle):
    """
    Compares an article's embedding with the stored article embeddings.

    ``embedder`` is anything with ``embed(text) -> list[float]``.
    """

    def __init__(self, store: CorpusStore, embedder, threshold: float = 0.9):
        super().__init__(store)
        self.embedder = embedder
        self.threshold = threshold

    def embedding_for(self, content: str) -> Optional[list[float]]:
        if not content:
            return None
        return normalize_vector(self.embedder.embed(content)).tolist()

    def check_content_similarity(self, content: str) -> SimilarityVerdict:
        if self.is_too_short(content):
            return SimilarityVerdict(is_similar=False, similarity_score=0.0)

        try:
            query = normalize_vector(self.embedder.embed(content))
            stored = [
                (post_id, vector)
                for post_id, vector in self.store.embeddings()
                if vector and len(vector) == len(query)
            ]
        except Exception as e:
            logger.error(f"Validator error (embedding similarity): {e}")
            return SimilarityVerdict(is_similar=False, similarity_score=0.0)

        if not stored:
            return SimilarityVerdict(is_similar=False, similarity_score=0.0)

        ids = [post_id for post_id, _ in stored]
        matrix = np.array([normalize_vector(vector) for _, vector in stored])
        similarities = matrix @ query
        best = int(np.argmax(similarities))
        score = float(similarities[best])

        logger.info(f"Embedding similarity: best match {ids[best]} ({score:.3f})")
        if score >= self.threshold:
            return SimilarityVerdict(
                is_similar=True,
                similarity_score=score,
                similar_post_id=ids[best],
            )

        return SimilarityVerdict(is_similar=False, similarity_score=0.0)
