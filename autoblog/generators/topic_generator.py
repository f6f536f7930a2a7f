"""
Blog topic generation with title de-duplication
"""

import json
import logging
import random
import re
from typing import Optional

from .prompts import build_topic_prompt, with_topic_selection
from ..config.categories import CATEGORY_TREE, DEFAULT_SUBCATEGORY
from ..exceptions import BackendError, DuplicateTopicError, TopicGenerationError
from ..llm.base import TextBackend
from ..models import GenerationOptions, Topic
from ..similarity.base import SimilarityOracle

logger = logging.getLogger(__name__)

JSON_OBJECT = re.compile(r"\{[\s\S]*?\}")
TITLE_LINE = re.compile(r"^[#*\s\d.)-]*title\s*[:\-]\s*(.+)$", re.IGNORECASE)
QUOTES = "\"'“”‘’`"


class TopicGenerator:
    """
    Asks the backend for topics until one has a title the oracle accepts.

    Attempts are bounded by ``max_attempts``. Each rejected title is fed
    back into the next prompt so the model steers away from it.
    """

    def __init__(
        self,
        backend: TextBackend,
        oracle: SimilarityOracle,
        category_tree: Optional[dict[str, list[str]]] = None,
        max_attempts: int = 10,
        rng: Optional[random.Random] = None,
    ):
        self.backend = backend
        self.oracle = oracle
        self.category_tree = category_tree or CATEGORY_TREE
        self.max_attempts = max(1, max_attempts)
        self.rng = rng or random.Random()

    def generate_topic(self, options: Optional[GenerationOptions] = None) -> Topic:
        """
        Generate a topic whose title is not already in the corpus.

        Raises:
            TopicGenerationError: the backend failed or its answer had no title
            DuplicateTopicError: every attempt produced a duplicate title
        """
        options = options or GenerationOptions()
        logger.info("Generating new blog topic")

        rejected_title = None
        for retry in range(self.max_attempts):
            category, subcategory = self.select_category(options.category, options.subcategory)
            prompt = with_topic_selection(
                build_topic_prompt(
                    category=options.category,
                    subcategory=options.subcategory,
                    keywords=options.keywords,
                    avoid_title=rejected_title,
                    retry=retry,
                ),
                category,
                subcategory,
            )

            try:
                output = self.backend.generate(prompt)
            except BackendError as e:
                logger.error(f"Error generating topic: {e}")
                raise TopicGenerationError(f"Topic generation failed: {e}") from e

            title = self.parse_title(output)
            if not title:
                raise TopicGenerationError("Backend response did not contain a parseable title")

            is_unique = self.oracle.check_title_uniqueness(title)
            logger.info(f"Topic uniqueness check: {is_unique}")
            if is_unique:
                logger.info(f'Generated unique topic: "{title}"')
                return Topic(title=title, category=category, subcategory=subcategory)

            logger.info(f'Topic "{title}" already exists, generating alternative (attempt {retry + 1}/{self.max_attempts})')
            rejected_title = title

        raise DuplicateTopicError(self.max_attempts, rejected_title or "")

    def select_category(
        self, category: Optional[str] = None, subcategory: Optional[str] = None
    ) -> tuple[str, str]:
        """Use the requested category pair, filling gaps at random from the category tree."""
        if not category:
            category = self.rng.choice(list(self.category_tree))

        if not subcategory:
            choices = self.category_tree.get(category) or []
            subcategory = self.rng.choice(choices) if choices else DEFAULT_SUBCATEGORY

        return category, subcategory

    @staticmethod
    def parse_title(output: str) -> str:
        """
        Pull the title out of a model response.

        Tries the first JSON object first, then falls back to a bold line
        (``**Title**``) or a ``Title: ...`` line.
        """
        if not output:
            return ""

        match = JSON_OBJECT.search(output)
        if match:
            try:
                data = json.loads(match.group())
                title = data.get("title") if isinstance(data, dict) else None
                if isinstance(title, str) and title.strip():
                    return _clean_title(title)
            except json.JSONDecodeError:
                pass

        logger.warning("Failed to parse JSON. Trying to extract title line.")
        lines = [line.strip() for line in output.splitlines() if line.strip()]

        for line in lines:
            if line.startswith("**") and line.endswith("**") and len(line) > 4:
                return _clean_title(line.replace("**", ""))

        for line in lines:
            found = TITLE_LINE.match(line)
            if found:
                return _clean_title(found.group(1).replace("**", ""))

        return ""


def _clean_title(title: str) -> str:
    title = title.strip().strip(QUOTES).strip()
    if title.lower().startswith("title:"):
        title = title[len("title:"):].strip().strip(QUOTES).strip()
    return title
