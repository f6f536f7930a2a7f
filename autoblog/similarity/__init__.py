"""Duplicate detection for titles and article bodies"""

from .base import SimilarityOracle, SimilarityVerdict, MIN_CONTENT_LENGTH
from .lexical import TextRelevanceOracle, extract_key_phrases, sample_without_replacement
from .embedding import EmbeddingSimilarityOracle
from ..config import Settings
from ..store import CorpusStore


def create_oracle(settings: Settings, store: CorpusStore, embedder=None) -> SimilarityOracle:
    """Build the oracle selected by SIMILARITY_STRATEGY."""
    strategy = settings.similarity_strategy.lower()

    if strategy == "lexical":
        return TextRelevanceOracle(store, threshold=settings.content_similarity_threshold)

    if strategy == "embedding":
        if embedder is None:
            from ..llm import create_embedder

            embedder = create_embedder(settings)
        return EmbeddingSimilarityOracle(
            store, embedder, threshold=settings.embedding_similarity_threshold
        )

    raise ValueError(f"Unknown SIMILARITY_STRATEGY: {settings.similarity_strategy}")


__all__ = [
    "SimilarityOracle",
    "SimilarityVerdict",
    "MIN_CONTENT_LENGTH",
    "TextRelevanceOracle",
    "EmbeddingSimilarityOracle",
    "create_oracle",
    "extract_key_phrases",
    "sample_without_replacement",
]
