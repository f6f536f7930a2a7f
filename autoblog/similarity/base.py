"""Base class for similarity oracles."""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from pydantic import BaseModel

from ..store import CorpusStore
from ..utils.text import derive_slug

logger = logging.getLogger(__name__)

# Bodies shorter than this are too short to compare meaningfully
MIN_CONTENT_LENGTH = 100


class SimilarityVerdict(BaseModel):
    """Outcome of a content similarity check"""

    is_similar: bool = False
    similarity_score: float = 0.0
    similar_post_id: Optional[int] = None


class SimilarityOracle(ABC):
    """
    Decides whether a title or an article body already exists in the corpus.

    Title checks are lookups against the store and are shared by every
    strategy; content checks are strategy specific.
    """

    def __init__(self, store: CorpusStore):
        self.store = store

    def check_title_uniqueness(self, title: str) -> bool:
        """
        Check a candidate title against stored articles.

        Runs three lookups in order: exact normalized title, stored titles
        containing the candidate, stored slugs containing the candidate's
        slug. Any hit, or any lookup error, means "not unique".
        """
        if not title or not title.strip():
            return False

        normalized = title.lower().strip()
        try:
            if normalized in self.store.all_normalized_titles():
                logger.info(f'Exact match found for title: "{normalized}"')
                return False

            if self.store.title_contains(normalized):
                logger.info(f'Fuzzy match found for title: "{normalized}"')
                return False

            slug = derive_slug(title)
            if not slug:
                logger.info(f'Title has no slug characters: "{normalized}"')
                return False
            if self.store.slug_contains(slug):
                logger.info(f'Slug match found for title: "{normalized}" ({slug})')
                return False
        except Exception as e:
            logger.error(f"Validator error (title uniqueness): {e}")
            return False

        return True

    @abstractmethod
    def check_content_similarity(self, content: str) -> SimilarityVerdict:
        """Compare an article body against the corpus."""
        pass

    def embedding_for(self, content: str) -> Optional[list[float]]:
        """Vector to persist with a new article, if the strategy uses one."""
        return None

    @staticmethod
    def is_too_short(content: Optional[str]) -> bool:
        return not content or len(content) < MIN_CONTENT_LENGTH
