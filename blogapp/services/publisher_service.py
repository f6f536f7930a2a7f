"""
Publisher Service
Persists generated articles and handles the post-generation mutations
(status changes, slug backfill, bulk publishing).
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from autoblog.exceptions import ArticleNotFoundError, DuplicateArticleError, ValidationError
from autoblog.utils.text import derive_slug
from blogapp.models import ARTICLE_STATUSES, Article

logger = logging.getLogger(__name__)


class PublisherService:
    def __init__(self, db_session_factory):
        self.Session = db_session_factory

    def save_post(self, data: dict) -> Article:
        """
        Insert a new article.

        Raises:
            ValidationError: a required field is missing
            DuplicateArticleError: the title or slug is already taken
        """
        title = (data.get('title') or '').strip()
        content = (data.get('content') or '').strip()
        category = (data.get('category') or '').strip()
        subcategory = (data.get('subcategory') or '').strip()
        slug = (data.get('slug') or '').strip()

        if not title or not content:
            raise ValidationError('Title and content are required')
        if not category or not subcategory:
            raise ValidationError('Category and subcategory are required')
        if not slug:
            raise ValidationError(f'Could not derive a slug from title "{title}"')

        logger.info(f'Saving blog post: "{title}"')

        db = self.Session()
        try:
            article = Article(
                title=title,
                slug=slug,
                content=content,
                category=category,
                subcategory=subcategory,
                status=data.get('status') or 'draft',
                similarity_score=data.get('similarity_score') or 0.0,
                similarity_warning=bool(data.get('similarity_warning')),
                similar_post_id=data.get('similar_post_id'),
                embedding=data.get('embedding'),
            )
            db.add(article)
            db.commit()
            logger.info(f"Successfully saved blog post with ID: {article.id}")
            return article
        except IntegrityError as e:
            db.rollback()
            logger.error(f'Error saving blog post "{title}": duplicate title or slug')
            raise DuplicateArticleError(f'An article with title "{title}" or slug "{slug}" already exists') from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update_post_status(self, post_id: int, status: str) -> Article:
        if status not in ARTICLE_STATUSES:
            raise ValueError('Invalid status value')

        db = self.Session()
        try:
            article = db.get(Article, post_id)
            if not article:
                raise ArticleNotFoundError(f"Blog post with ID {post_id} not found")

            article.status = status
            db.commit()
            logger.info(f"Updated blog post {post_id} status to {status}")
            return article
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating post status: {e}")
            raise
        finally:
            db.close()

    def get_post_by_id(self, post_id: int) -> Article:
        db = self.Session()
        try:
            article = db.get(Article, post_id)
            if not article:
                raise ArticleNotFoundError(f"Blog post with ID {post_id} not found")
            return article
        finally:
            db.close()

    def get_post_by_slug(self, slug: str) -> Article:
        db = self.Session()
        try:
            article = db.query(Article).filter_by(slug=slug).first()
            if not article:
                raise ArticleNotFoundError(f"Blog post with slug {slug} not found")
            return article
        finally:
            db.close()

    def update_post_slug(self, post_id: int, slug: str) -> Article:
        db = self.Session()
        try:
            article = db.get(Article, post_id)
            if not article:
                raise ArticleNotFoundError(f"Blog post with ID {post_id} not found")

            article.slug = slug
            db.commit()
            logger.info(f"Updated blog post {post_id} slug to {slug}")
            return article
        except IntegrityError as e:
            db.rollback()
            raise DuplicateArticleError(f"Slug {slug} is already used by another post") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def backfill_slugs(self) -> list[Article]:
        """
        Re-derive every article's slug from its title.

        Articles whose derived slug collides with another post keep their
        current slug and are logged.
        """
        db = self.Session()
        try:
            posts = db.query(Article.id, Article.title, Article.slug).all()
        finally:
            db.close()

        updated = []
        for post_id, title, current in posts:
            slug = derive_slug(title)
            if not slug or slug == current:
                continue
            try:
                updated.append(self.update_post_slug(post_id, slug))
            except DuplicateArticleError as e:
                logger.warning(f"Skipping slug backfill for post {post_id}: {e}")

        logger.info(f"Backfilled slugs for {len(updated)} posts")
        return updated

    def list_slugs(self) -> list[dict]:
        db = self.Session()
        try:
            rows = db.query(Article.title, Article.slug).order_by(Article.created_at.desc()).all()
            return [{'title': title, 'slug': slug} for title, slug in rows]
        finally:
            db.close()

    def get_categories(self) -> list[dict]:
        """Distinct categories, each with its distinct subcategories."""
        db = self.Session()
        try:
            rows = db.query(Article.category, Article.subcategory).distinct().order_by(
                Article.category, Article.subcategory
            ).all()
        finally:
            db.close()

        grouped: dict[str, list[str]] = {}
        for category, subcategory in rows:
            grouped.setdefault(category, []).append(subcategory)
        return [{'category': category, 'subcategory': subs} for category, subs in grouped.items()]

    def publish_all_drafts(self) -> int:
        db = self.Session()
        try:
            count = db.query(Article).filter_by(status='draft').update(
                {Article.status: 'published'}, synchronize_session=False
            )
            db.commit()
            logger.info(f"Published {count} draft posts")
            return count
        except Exception as e:
            db.rollback()
            logger.error(f"Error publishing all posts: {e}")
            raise
        finally:
            db.close()

    def count_posts(self, status: Optional[str] = None) -> int:
        db = self.Session()
        try:
            query = db.query(Article)
            if status:
                query = query.filter_by(status=status)
            return query.count()
        finally:
            db.close()
