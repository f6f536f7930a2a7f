"""Storage capabilities the similarity oracles rely on."""

from abc import ABC, abstractmethod
from typing import Optional


class CorpusStore(ABC):
    """
    Read-side view of the article corpus.

    The oracles only ever ask these questions; the web app provides a
    SQLAlchemy-backed implementation.
    """

    @abstractmethod
    def all_normalized_titles(self) -> set[str]:
        """Every stored title, lowercased and trimmed."""
        pass

    @abstractmethod
    def title_contains(self, text: str) -> bool:
        """Whether any stored title contains ``text`` (case-insensitive, literal)."""
        pass

    @abstractmethod
    def slug_contains(self, slug: str) -> bool:
        """Whether any stored slug contains ``slug`` (literal)."""
        pass

    @abstractmethod
    def search_relevant(self, query: str, limit: int = 1) -> list[tuple[int, float]]:
        """Relevance-ranked (article id, score) pairs for a free-text query, best first."""
        pass

    @abstractmethod
    def get_summary(self, article_id: int) -> Optional[dict]:
        """Title and opening excerpt of an article, or None if it does not exist."""
        pass

    @abstractmethod
    def embeddings(self) -> list[tuple[int, list[float]]]:
        """(article id, stored embedding) for every article that has one."""
        pass
