"""
Article body generation with bounded similarity retries
"""

import logging
from typing import Optional

from .prompts import build_content_prompt
from ..exceptions import BackendError, ContentGenerationError
from ..llm.base import TextBackend
from ..models import DEFAULT_MAX_WORDS, DEFAULT_MIN_WORDS, DEFAULT_TONE, GeneratedContent
from ..similarity.base import SimilarityOracle
from ..store import CorpusStore
from ..utils.text import format_content

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 500


class ContentGenerator:
    """
    Generates the body of an article for an accepted topic.

    When the oracle reports a near-duplicate the body is regenerated with
    the offending article as a negative example, at most ``max_retries``
    times. The last attempt is kept regardless and flagged with a warning.
    """

    def __init__(
        self,
        backend: TextBackend,
        oracle: SimilarityOracle,
        store: Optional[CorpusStore] = None,
        max_retries: int = 3,
    ):
        self.backend = backend
        self.oracle = oracle
        self.store = store
        self.max_retries = max(0, max_retries)

    def generate_content(
        self,
        title: str,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        min_words: int = DEFAULT_MIN_WORDS,
        max_words: int = DEFAULT_MAX_WORDS,
        tone: str = DEFAULT_TONE,
    ) -> GeneratedContent:
        """
        Generate article text for a title.

        Raises:
            ContentGenerationError: missing title, backend failure or empty output
        """
        if not title or not title.strip():
            raise ContentGenerationError("Title is required for content generation")

        logger.info(f'Generating content for topic: "{title}"')

        avoid = None
        retry = 0
        while True:
            prompt = build_content_prompt(
                title=title,
                category=category,
                subcategory=subcategory,
                min_words=min_words,
                max_words=max_words,
                tone=tone or DEFAULT_TONE,
                avoid=avoid,
            )

            try:
                content = self.backend.generate(prompt)
            except BackendError as e:
                logger.error(f"Error generating content: {e}")
                raise ContentGenerationError(f"Content generation failed: {e}") from e

            if not content or not content.strip():
                raise ContentGenerationError(f'Backend returned empty content for "{title}"')

            verdict = self.oracle.check_content_similarity(content)

            if not verdict.is_similar:
                logger.info(f'Successfully generated content for "{title}" ({len(content)} chars)')
                return GeneratedContent(
                    content=content,
                    similarity_score=verdict.similarity_score,
                    attempts=retry + 1,
                )

            if retry < self.max_retries:
                logger.info(
                    f"Generated content is too similar to existing content "
                    f"({verdict.similarity_score:.3f}, post {verdict.similar_post_id}), regenerating"
                )
                avoid = self._describe_post(verdict.similar_post_id)
                retry += 1
                continue

            logger.warning(f"Failed to generate unique content after {retry} retries, keeping last attempt")
            return GeneratedContent(
                content=content,
                similarity_score=verdict.similarity_score,
                similarity_warning=True,
                similar_post_id=verdict.similar_post_id,
                attempts=retry + 1,
            )

    def _describe_post(self, post_id: Optional[int]) -> Optional[dict]:
        """Title and excerpt of the article to steer away from, if it can be loaded."""
        if post_id is None:
            return None

        summary = None
        if self.store is not None:
            try:
                summary = self.store.get_summary(post_id)
            except Exception as e:
                logger.warning(f"Could not load similar post {post_id}: {e}")

        if not summary:
            return {"id": post_id}

        return {
            "id": post_id,
            "title": summary.get("title"),
            "excerpt": (summary.get("excerpt") or "")[:EXCERPT_LENGTH],
        }

    @staticmethod
    def format_content(content: str) -> str:
        """Normalize blank lines and strip code fences from generated text."""
        return format_content(content)
