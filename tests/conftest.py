"""
Pytest configuration and fixtures for Autoblog tests.
"""

import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment
os.environ['TESTING'] = '1'

from autoblog.exceptions import BackendError  # noqa: E402
from autoblog.generators.prompts import TOPIC_OUTPUT_FORMAT  # noqa: E402
from autoblog.llm.base import TextBackend  # noqa: E402


# ============================================================
# Fakes
# ============================================================

def make_article_body(n: int) -> str:
    """A markdown article with vocabulary unique to ``n``."""
    sections = []
    for i in range(1, 4):
        sections.append(
            f"## Section {i}\n\n"
            f"Notes on orbit{n}x{i}, lattice{n}x{i}, harbor{n}x{i} and meadow{n}x{i} matter. "
            f"Also quartz{n}x{i}, ember{n}x{i}, cobalt{n}x{i} and willow{n}x{i} matter."
        )
    return "# Introduction\n\n" + "\n\n\n\n".join(sections) + "\n\n## Conclusion\n\nThat wraps it up."


class FakeTextBackend(TextBackend):
    """
    Scripted backend: topic prompts get JSON titles, content prompts get
    article bodies. Call numbers listed in ``fail_topic_calls`` or
    ``fail_content_calls`` raise BackendError.
    """

    def __init__(self, titles=None, contents=None):
        self.titles = list(titles or [])
        self.contents = list(contents or [])
        self.fail_topic_calls = set()
        self.fail_content_calls = set()
        self.prompts = []
        self.topic_calls = 0
        self.content_calls = 0

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)

        if TOPIC_OUTPUT_FORMAT in prompt:
            self.topic_calls += 1
            if self.topic_calls in self.fail_topic_calls:
                raise BackendError("Gemini API error: service unavailable")
            title = self.titles.pop(0) if self.titles else f"Fresh Perspectives Volume {self.topic_calls} Edition"
            return json.dumps({"title": title, "category": "ignored", "subcategory": "ignored"})

        self.content_calls += 1
        if self.content_calls in self.fail_content_calls:
            raise BackendError("Gemini API error: service unavailable")
        if self.contents:
            return self.contents.pop(0)
        return make_article_body(self.content_calls)

    @property
    def topic_prompts(self):
        return [p for p in self.prompts if TOPIC_OUTPUT_FORMAT in p]

    @property
    def content_prompts(self):
        return [p for p in self.prompts if TOPIC_OUTPUT_FORMAT not in p]


# ============================================================
# Settings Fixtures
# ============================================================

@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the developer's environment and .env file."""
    from autoblog.config import Settings

    return Settings(
        _env_file=None,
        llm_provider="gemini",
        gemini_api_key="test-api-key-0123456789abcdef",
        similarity_strategy="lexical",
        batch_delay_seconds=0,
        database_path=str(tmp_path / "autoblog_test.db"),
        schedule_enabled=False,
        log_dir=str(tmp_path / "logs"),
        flask_secret_key="test-secret-key",
    )


# ============================================================
# Database Fixtures
# ============================================================

@pytest.fixture(scope="function")
def test_db(tmp_path):
    """Create a fresh test database for each test; yields the session factory."""
    from blogapp.models import get_session_factory, init_db

    engine = init_db(str(tmp_path / "test_db.sqlite"))
    Session = get_session_factory(engine)

    yield Session

    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_db):
    """Get a database session."""
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def sample_article(db_session):
    """Create a stored article."""
    from blogapp.models import Article

    article = Article(
        title="Getting Started with Python",
        slug="getting-started-with-python",
        content=(
            "Python is a versatile programming language loved by beginners and experts alike. "
            "Its readable syntax makes it a great first language for anyone learning to code.\n\n"
            "Virtual environments keep project dependencies isolated so that upgrading one "
            "project never breaks another one on the same machine."
        ),
        category="Technology",
        subcategory="Programming",
        status="draft",
    )
    db_session.add(article)
    db_session.commit()
    return article


@pytest.fixture
def article_store(test_db):
    from blogapp.store import ArticleStore

    return ArticleStore(test_db)


# ============================================================
# Mock Fixtures
# ============================================================

@pytest.fixture
def fake_backend():
    return FakeTextBackend()


@pytest.fixture
def mock_store():
    """CorpusStore double with an empty corpus."""
    store = MagicMock()
    store.all_normalized_titles.return_value = set()
    store.title_contains.return_value = False
    store.slug_contains.return_value = False
    store.search_relevant.return_value = []
    store.get_summary.return_value = None
    store.embeddings.return_value = []
    return store


# ============================================================
# Service Fixtures
# ============================================================

@pytest.fixture
def gen_service(test_settings, test_db, fake_backend):
    """GenerationService wired to the fake backend and the test database."""
    from blogapp.services import build_generation_service

    return build_generation_service(test_settings, test_db, backend=fake_backend)


# ============================================================
# Flask App Fixtures
# ============================================================

@pytest.fixture
def app(test_settings, test_db, gen_service):
    """Create test Flask application."""
    from blogapp import create_app

    app = create_app(test_settings, session_factory=test_db, generation_service=gen_service)
    app.config['TESTING'] = True
    yield app
    app.blog_scheduler.shutdown(wait=False)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
