"""Content similarity via relevance search over randomly sampled key phrases."""

import logging
import random
import re
from typing import Optional, Sequence, TypeVar

from .base import SimilarityOracle, SimilarityVerdict
from ..store import CorpusStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

SENTENCE_SPLIT = re.compile(r"[.!?]+")
PARAGRAPH_SPLIT = re.compile(r"\n\n+")

MIN_SENTENCE_LENGTH = 30
MIN_PARAGRAPH_LENGTH = 100
SENTENCE_SAMPLES = 3
PARAGRAPH_SAMPLES = 2


def sample_without_replacement(
    items: Sequence[T], count: int, rng: Optional[random.Random] = None
) -> list[T]:
    """Pick up to ``count`` distinct positions from ``items``; fewer if the pool is smaller."""
    rng = rng or random
    return rng.sample(list(items), min(count, len(items)))


def extract_key_phrases(content: str, rng: Optional[random.Random] = None) -> list[str]:
    """
    Sample a handful of long sentences and long paragraphs from an article.

    Sentences must be longer than 30 characters and paragraphs longer than
    100 once stripped. At most three sentences and two paragraphs are used.
    """
    sentences = [s.strip() for s in SENTENCE_SPLIT.split(content) if len(s.strip()) > MIN_SENTENCE_LENGTH]
    paragraphs = [p.strip() for p in PARAGRAPH_SPLIT.split(content) if len(p.strip()) > MIN_PARAGRAPH_LENGTH]

    return (
        sample_without_replacement(sentences, SENTENCE_SAMPLES, rng)
        + sample_without_replacement(paragraphs, PARAGRAPH_SAMPLES, rng)
    )


class TextRelevanceOracle(SimilarityOracle):
    """
    Flags content whose sampled phrases score highly in a relevance search.

    This catches gross duplication cheaply; it will miss paraphrases.
    """

    def __init__(
        self,
        store: CorpusStore,
        threshold: float = 0.5,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(store)
        self.threshold = threshold
        self.rng = rng

    def check_content_similarity(self, content: str) -> SimilarityVerdict:
        if self.is_too_short(content):
            return SimilarityVerdict(is_similar=False, similarity_score=0.0)

        phrases = extract_key_phrases(content, self.rng)
        if not phrases:
            return SimilarityVerdict(is_similar=False, similarity_score=0.0)

        query = " ".join(f'"{phrase}"' for phrase in phrases)
        try:
            matches = self.store.search_relevant(query, limit=1)
        except Exception as e:
            logger.error(f"Validator error (content similarity): {e}")
            return SimilarityVerdict(is_similar=False, similarity_score=0.0)

        logger.info(f"Similarity check: {'found' if matches else 'not found'}")
        if matches:
            post_id, score = matches[0]
            if score > self.threshold:
                return SimilarityVerdict(
                    is_similar=True,
                    similarity_score=score,
                    similar_post_id=post_id,
                )

        return SimilarityVerdict(is_similar=False, similarity_score=0.0)
