"""
SQLAlchemy-backed article corpus used by the similarity oracles.
"""

import logging
from typing import Optional

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity
from sqlalchemy import func

from autoblog.store import CorpusStore
from blogapp.models import Article

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 500


class ArticleStore(CorpusStore):
    """
    Answers corpus questions with short-lived sessions, so a single store
    can be shared by concurrent generation threads.
    """

    def __init__(self, db_session_factory):
        self.Session = db_session_factory

    def all_normalized_titles(self) -> set[str]:
        db = self.Session()
        try:
            return {title.lower().strip() for (title,) in db.query(Article.title).all()}
        finally:
            db.close()

    def title_contains(self, text: str) -> bool:
        db = self.Session()
        try:
            match = db.query(Article.id).filter(
                func.lower(Article.title).contains(text.lower(), autoescape=True)
            ).first()
            return match is not None
        finally:
            db.close()

    def slug_contains(self, slug: str) -> bool:
        db = self.Session()
        try:
            match = db.query(Article.id).filter(
                func.lower(Article.slug).contains(slug.lower(), autoescape=True)
            ).first()
            return match is not None
        finally:
            db.close()

    def search_relevant(self, query: str, limit: int = 1) -> list[tuple[int, float]]:
        """
        Rank stored articles against a free-text query.

        Scores are TF-IDF cosine similarities (0..1) over title and content.
        Articles sharing no vocabulary with the query are left out.
        """
        if not query or not query.strip():
            return []

        db = self.Session()
        try:
            rows = db.query(Article.id, Article.title, Article.content).all()
        finally:
            db.close()

        if not rows:
            return []

        documents = [f"{title}\n{content}" for _, title, content in rows]
        vectorizer = TfidfVectorizer(stop_words="english")
        try:
            # Last row is the query
            matrix = vectorizer.fit_transform(documents + [query])
        except ValueError:
            # No usable vocabulary (only stop words)
            return []

        scores = cosine_similarity(matrix[-1], matrix[:-1]).ravel()
        ranked = np.argsort(scores)[::-1][:limit]
        return [(rows[i][0], float(scores[i])) for i in ranked if scores[i] > 0]

    def get_summary(self, article_id: int) -> Optional[dict]:
        db = self.Session()
        try:
            article = db.get(Article, article_id)
            if not article:
                return None
            return {
                "id": article.id,
                "title": article.title,
                "excerpt": (article.content or "")[:EXCERPT_LENGTH],
            }
        finally:
            db.close()

    def embeddings(self) -> list[tuple[int, list[float]]]:
        db = self.Session()
        try:
            rows = db.query(Article.id, Article.embedding).filter(Article.embedding.isnot(None)).all()
            return [(article_id, embedding) for article_id, embedding in rows if embedding]
        finally:
            db.close()
