"""
Generation Service
Orchestrates the topic -> content -> publish pipeline, plus batches and
background jobs tracked in the generation_jobs table.
"""

import logging
import threading
import time
import uuid
from typing import Callable, Optional, Union

from autoblog.config import Settings
from autoblog.exceptions import TopicGenerationError
from autoblog.generators import ContentGenerator, TopicGenerator
from autoblog.llm import create_text_backend
from autoblog.llm.base import TextBackend
from autoblog.models import GenerationOptions
from autoblog.similarity import SimilarityOracle, create_oracle
from autoblog.utils.text import derive_slug
from blogapp.models import GenerationJob, utcnow
from blogapp.services.publisher_service import PublisherService
from blogapp.store import ArticleStore

logger = logging.getLogger(__name__)

JOB_KINDS = ('single', 'batch', 'scheduled')


class GenerationService:
    def __init__(
        self,
        db_session_factory,
        topic_generator: TopicGenerator,
        content_generator: ContentGenerator,
        oracle: SimilarityOracle,
        publisher: Optional[PublisherService] = None,
        batch_delay: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.Session = db_session_factory
        self.topic_generator = topic_generator
        self.content_generator = content_generator
        self.oracle = oracle
        self.publisher = publisher or PublisherService(db_session_factory)
        self.batch_delay = batch_delay
        self._sleep = sleep

        # job_id -> Thread
        self._running_jobs: dict[str, threading.Thread] = {}
        self._jobs_lock = threading.Lock()

    def generate_and_publish_post(self, options: Union[GenerationOptions, dict, None] = None) -> dict:
        """
        Run one full generation: topic, content, persist.

        Never raises. Returns ``{'success': True, 'post': ..., 'message': ...}``
        or ``{'success': False, 'error': ..., 'message': ...}``.
        """
        try:
            options = self._coerce_options(options)
            logger.info("Starting blog post generation job")

            topic = self.topic_generator.generate_topic(options)
            if not topic or not topic.title:
                raise TopicGenerationError("Failed to generate valid topic")

            generated = self.content_generator.generate_content(
                title=topic.title,
                category=topic.category,
                subcategory=topic.subcategory,
                min_words=options.min_words,
                max_words=options.max_words,
                tone=options.tone,
            )
            content = ContentGenerator.format_content(generated.content)

            article = self.publisher.save_post({
                'title': topic.title,
                'slug': derive_slug(topic.title),
                'content': content,
                'category': topic.category,
                'subcategory': topic.subcategory,
                'status': 'published' if options.auto_publish else 'draft',
                'similarity_score': generated.similarity_score,
                'similarity_warning': generated.similarity_warning,
                'similar_post_id': generated.similar_post_id,
                'embedding': self._embedding_for(content),
            })

            logger.info(f'Blog post "{topic.title}" saved with ID {article.id}')
            return {
                'success': True,
                'post': article.to_dict(),
                'message': f'Successfully generated post: "{topic.title}"',
            }
        except Exception as e:
            logger.error(f"Error in blog generation job: {e}", exc_info=True)
            return {
                'success': False,
                'error': str(e),
                'message': 'Failed to generate blog post',
            }

    def generate_batch(self, count: int, options: Union[GenerationOptions, dict, None] = None) -> list[dict]:
        """Generate ``count`` posts in order, pausing between runs. One failure never stops the batch."""
        results = []
        for i in range(count):
            logger.info(f"Generating batch post {i + 1}/{count}")
            try:
                results.append(self.generate_and_publish_post(options))
            except Exception as e:
                logger.error(f"Batch post {i + 1}/{count} failed: {e}", exc_info=True)
                results.append({
                    'success': False,
                    'error': str(e),
                    'message': 'Failed to generate blog post',
                })

            if i < count - 1 and self.batch_delay > 0:
                self._sleep(self.batch_delay)

        succeeded = sum(1 for r in results if r.get('success'))
        logger.info(f"Batch finished: {succeeded}/{count} posts generated")
        return results

    # --- Background jobs ---

    def create_job(self, kind: str, count: int = 1, options: Optional[dict] = None) -> str:
        """Insert a pending job record and return its job_id."""
        if kind not in JOB_KINDS:
            raise ValueError(f"Unknown job kind: {kind}")

        db = self.Session()
        try:
            job_id = f"job-{uuid.uuid4().hex[:8]}"
            job = GenerationJob(
                job_id=job_id,
                kind=kind,
                status='pending',
                requested_count=count,
                options=self._options_dict(options),
                results=[],
            )
            db.add(job)
            db.commit()
            return job_id
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def start_background_job(self, kind: str, count: int = 1, options: Optional[dict] = None) -> str:
        """
        Creates a job record and spawns the worker thread.
        Returns the new job_id without waiting for generation.
        """
        job_id = self.create_job(kind, count, options)

        thread = threading.Thread(
            target=self.run_job,
            args=(job_id, count, options),
            name=f"autoblog-{job_id}",
            daemon=True,
        )
        with self._jobs_lock:
            self._running_jobs[job_id] = thread
        thread.start()

        logger.info(f"Started {kind} job {job_id} ({count} posts)")
        return job_id

    def start_batch_job(self, count: int, options: Optional[dict] = None) -> str:
        return self.start_background_job('batch', count, options)

    def run_job(self, job_id: str, count: int, options: Optional[dict] = None):
        """Worker body: run the batch and record the outcome on the job row."""
        try:
            self._update_job(job_id, status='running', started_at=utcnow())
            results = self.generate_batch(count, options)

            summaries = [self._summarize(r) for r in results]
            succeeded = sum(1 for s in summaries if s['success'])
            failed = len(summaries) - succeeded
            errors = [s['error'] for s in summaries if s.get('error')]

            self._update_job(
                job_id,
                status='completed' if succeeded or not summaries else 'failed',
                results=summaries,
                succeeded_count=succeeded,
                failed_count=failed,
                error_message=errors[0] if errors and not succeeded else None,
                completed_at=utcnow(),
            )
            logger.info(f"Job {job_id} finished: {succeeded} succeeded, {failed} failed")
        except Exception as e:
            logger.error(f"Job {job_id} crashed: {e}", exc_info=True)
            self._handle_job_failure(job_id, str(e))
        finally:
            with self._jobs_lock:
                self._running_jobs.pop(job_id, None)

    def get_job_status(self, job_id: str) -> Optional[dict]:
        db = self.Session()
        try:
            job = db.query(GenerationJob).filter_by(job_id=job_id).first()
            if not job:
                return None
            return job.to_dict()
        finally:
            db.close()

    def running_job_ids(self) -> list[str]:
        with self._jobs_lock:
            return list(self._running_jobs)

    # --- Internal helpers ---

    def _embedding_for(self, content: str) -> Optional[list[float]]:
        try:
            return self.oracle.embedding_for(content)
        except Exception as e:
            logger.warning(f"Could not compute embedding for new post: {e}")
            return None

    @staticmethod
    def _coerce_options(options) -> GenerationOptions:
        if options is None:
            return GenerationOptions()
        if isinstance(options, GenerationOptions):
            return options
        return GenerationOptions(**options)

    @staticmethod
    def _options_dict(options) -> dict:
        if options is None:
            return {}
        if isinstance(options, GenerationOptions):
            return options.model_dump()
        return dict(options)

    @staticmethod
    def _summarize(result: dict) -> dict:
        post = result.get('post') or {}
        return {
            'success': bool(result.get('success')),
            'post_id': post.get('id'),
            'title': post.get('title'),
            'slug': post.get('slug'),
            'similarity_warning': post.get('similarity_warning', False),
            'error': result.get('error'),
        }

    def _update_job(self, job_id: str, **fields):
        db = self.Session()
        try:
            job = db.query(GenerationJob).filter_by(job_id=job_id).first()
            if not job:
                logger.warning(f"Job {job_id} not found")
                return
            for key, value in fields.items():
                setattr(job, key, value)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _handle_job_failure(self, job_id: str, error_msg: str):
        db = self.Session()
        try:
            job = db.query(GenerationJob).filter_by(job_id=job_id).first()
            if job:
                job.status = 'failed'
                job.error_message = error_msg
                job.completed_at = utcnow()
                db.commit()
        finally:
            db.close()


def build_generation_service(
    settings: Settings,
    db_session_factory,
    backend: Optional[TextBackend] = None,
    embedder=None,
) -> GenerationService:
    """Wire backend, store, oracle and generators from settings."""
    store = ArticleStore(db_session_factory)
    backend = backend or create_text_backend(settings)
    oracle = create_oracle(settings, store, embedder=embedder)

    return GenerationService(
        db_session_factory,
        topic_generator=TopicGenerator(backend, oracle, max_attempts=settings.max_topic_attempts),
        content_generator=ContentGenerator(
            backend, oracle, store=store, max_retries=settings.max_content_retries
        ),
        oracle=oracle,
        publisher=PublisherService(db_session_factory),
        batch_delay=settings.batch_delay_seconds,
    )
