"""Semantic embedder using sentence-transformers (local, free)."""

from typing import Optional
import logging

from sentence_transformers import SentenceTransformer

from ..exceptions import BackendError


logger = logging.getLogger(__name__)


class SemanticEmbedder:
    """
    Generates semantic embeddings using sentence-transformers.
    Runs locally - no API costs.

    Default model: all-MiniLM-L6-v2 (384 dimensions)
    """

    DEFAULT_MODEL = "all-MiniLM-L6-v2"

    def __init__(self, model_name: Optional[str] = None):
        self.model_name = model_name or self.DEFAULT_MODEL
        self._model: Optional[SentenceTransformer] = None

    @property
    def model(self) -> SentenceTransformer:
        """Lazy load the model."""
        if self._model is None:
            logger.info(f"Loading embedding model: {self.model_name}")
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed(self, text: str) -> list[float]:
        """Generate embedding for a single text."""
        try:
            embedding = self.model.encode(text, convert_to_numpy=True)
        except Exception as e:
            raise BackendError(f"Embedding failed: {e}") from e
        return embedding.tolist()
