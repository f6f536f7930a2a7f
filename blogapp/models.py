"""
Database models for the blog generation webapp.
Uses SQLite with SQLAlchemy for easy migration to cloud later.
"""

from datetime import datetime, timezone
from sqlalchemy import create_engine, Column, Integer, String, Text, Float, Boolean, DateTime, JSON, Index
from sqlalchemy.orm import declarative_base, sessionmaker, validates
from sqlalchemy.pool import QueuePool

from autoblog.utils.text import count_words

Base = declarative_base()

ARTICLE_STATUSES = ('draft', 'published', 'archived')
JOB_STATUSES = ('pending', 'running', 'completed', 'failed')


def utcnow():
    return datetime.now(timezone.utc)


class Article(Base):
    """A generated blog article."""
    __tablename__ = 'articles'
    __table_args__ = (
        Index('idx_article_category', 'category', 'subcategory'),
        Index('idx_article_status', 'status'),
        Index('idx_article_created', 'created_at'),
    )

    id = Column(Integer, primary_key=True)
    title = Column(String(300), nullable=False, unique=True)
    slug = Column(String(300), nullable=False, unique=True)
    content = Column(Text, nullable=False)

    category = Column(String(100), nullable=False)
    subcategory = Column(String(100), nullable=False)

    status = Column(String(20), nullable=False, default='draft')  # draft, published, archived

    # Derived from content
    word_count = Column(Integer, nullable=False, default=0)

    # Duplicate detection results at generation time
    similarity_score = Column(Float, nullable=False, default=0.0)
    similarity_warning = Column(Boolean, nullable=False, default=False)
    similar_post_id = Column(Integer)  # article the content was judged closest to

    # Normalized embedding (only written by the embedding similarity strategy)
    embedding = Column(JSON(none_as_null=True))

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @validates('title', 'slug', 'category', 'subcategory')
    def _strip(self, key, value):
        return value.strip() if isinstance(value, str) else value

    @validates('content')
    def _update_word_count(self, key, value):
        self.word_count = count_words(value or '')
        return value

    @validates('status')
    def _check_status(self, key, value):
        if value not in ARTICLE_STATUSES:
            raise ValueError(f"Invalid status value: {value}")
        return value

    @validates('similarity_score')
    def _check_score(self, key, value):
        return max(0.0, float(value or 0.0))

    def to_dict(self, include_content: bool = True) -> dict:
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'category': self.category,
            'subcategory': self.subcategory,
            'status': self.status,
            'word_count': self.word_count,
            'similarity_score': self.similarity_score,
            'similarity_warning': self.similarity_warning,
            'similar_post_id': self.similar_post_id,
            'url': f"/blog/{self.slug}",
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_content:
            data['content'] = self.content
        return data


class GenerationJob(Base):
    """Track background generation runs (batches, manual and scheduled triggers)."""
    __tablename__ = 'generation_jobs'
    __table_args__ = (
        Index('idx_job_status', 'status'),
        Index('idx_job_created', 'created_at'),
    )

    id = Column(Integer, primary_key=True)
    job_id = Column(String(50), unique=True, nullable=False)
    kind = Column(String(20), nullable=False, default='single')  # single, batch, scheduled

    status = Column(String(20), default='pending')  # pending, running, completed, failed

    requested_count = Column(Integer, default=1)
    succeeded_count = Column(Integer, default=0)
    failed_count = Column(Integer, default=0)

    options = Column(JSON, default=dict)  # Original generation options
    results = Column(JSON, default=list)  # Per-run summaries
    error_message = Column(Text)

    started_at = Column(DateTime)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)

    def to_dict(self) -> dict:
        return {
            'job_id': self.job_id,
            'kind': self.kind,
            'status': self.status,
            'requested_count': self.requested_count,
            'succeeded_count': self.succeeded_count,
            'failed_count': self.failed_count,
            'options': self.options or {},
            'results': self.results or [],
            'error': self.error_message,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


# Database initialization
def init_db(db_path: str = 'autoblog.db'):
    """Initialize the database with connection pooling."""
    engine = create_engine(
        f'sqlite:///{db_path}',
        echo=False,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # Recycle connections after 30 minutes
        connect_args={'check_same_thread': False}  # Required for SQLite with threading
    )
    Base.metadata.create_all(engine)
    return engine


def get_session_factory(engine):
    """Get a session factory bound to the engine."""
    return sessionmaker(bind=engine, expire_on_commit=False)
