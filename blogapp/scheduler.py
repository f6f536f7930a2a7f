"""
Blog Generation Scheduler.
Uses APScheduler to run post generation on a cron interval.
"""

import logging
import threading
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from autoblog.config import Settings
from autoblog.exceptions import SchedulerConfigError

logger = logging.getLogger(__name__)

BLOG_GENERATION_JOB = 'blogGeneration'


class BlogScheduler:
    """
    Owns the APScheduler instance and the registry of named jobs.

    At most one job exists per name: scheduling an existing name replaces it.
    """

    def __init__(self, generation_service, settings: Settings, scheduler: Optional[BackgroundScheduler] = None):
        self.gen_service = generation_service
        self.settings = settings
        self._scheduler = scheduler or BackgroundScheduler(
            timezone=settings.schedule_timezone,
            job_defaults={
                'coalesce': True,  # Combine missed runs into one
                'max_instances': 1,  # Only one instance per job
                'misfire_grace_time': 3600,
            }
        )
        self._jobs: dict[str, object] = {}
        self._lock = threading.RLock()

        # Jobs that can be triggered by name, scheduled or not
        self._runnable: dict[str, Callable[[], str]] = {
            BLOG_GENERATION_JOB: lambda: self.gen_service.start_background_job('single', 1),
        }

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> bool:
        """Register the blog generation job and start the scheduler. Returns False if nothing was scheduled."""
        if not self.settings.schedule_enabled:
            logger.info("Scheduling disabled (SCHEDULE_ENABLED=false)")
            return False

        try:
            self.schedule_job(BLOG_GENERATION_JOB, self.settings.schedule_interval, self.run_scheduled_generation)
        except SchedulerConfigError as e:
            logger.error(f"Scheduler not started: {e}")
            return False

        with self._lock:
            if not self._scheduler.running:
                self._scheduler.start()
        logger.info(f"Scheduler started ({self.settings.schedule_interval}, {self.settings.schedule_timezone})")
        return True

    def schedule_job(self, name: str, cron_expression: str, func: Callable[[], object]):
        """Add or replace a named cron job."""
        trigger = self._build_trigger(cron_expression)

        with self._lock:
            if name in self._jobs:
                self._remove(name)
                logger.info(f"Stopped existing job: {name}")

            job = self._scheduler.add_job(
                self._execute,
                trigger=trigger,
                args=[name, func],
                id=name,
                name=name,
                replace_existing=True,
            )
            self._jobs[name] = job

        logger.info(f"Scheduled job {name}: {cron_expression}")
        return job

    def stop_job(self, name: str) -> bool:
        with self._lock:
            if name not in self._jobs:
                logger.warning(f"Job not found: {name}")
                return False
            self._remove(name)
        logger.info(f"Stopped job: {name}")
        return True

    def stop_all_jobs(self):
        with self._lock:
            names = list(self._jobs)
            for name in names:
                self._remove(name)
        logger.info(f"Stopped all jobs ({len(names)})")

    def shutdown(self, wait: bool = True):
        """Shutdown the scheduler gracefully."""
        self.stop_all_jobs()
        with self._lock:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=wait)
                logger.info("Scheduler shutdown complete")

    def get_scheduled_jobs(self) -> list[dict]:
        """Get list of all scheduled jobs."""
        with self._lock:
            jobs = [self._scheduler.get_job(name) or job for name, job in self._jobs.items()]

        return [{
            'id': job.id,
            'name': job.name,
            'next_run': job.next_run_time.isoformat() if getattr(job, 'next_run_time', None) else None,
            'trigger': str(job.trigger),
        } for job in jobs]

    def run_job_now(self, name: str) -> dict:
        """Trigger a named job immediately without waiting for it to finish."""
        runner = self._runnable.get(name)
        if runner is None:
            logger.warning(f"Unknown job requested: {name}")
            return {
                'success': False,
                'error': f'Unknown job: {name}',
                'message': f'Job {name} does not exist',
            }

        try:
            job_id = runner()
        except Exception as e:
            logger.error(f"Error starting job {name}: {e}", exc_info=True)
            return {
                'success': False,
                'error': str(e),
                'message': f'Failed to start job {name}',
            }

        logger.info(f"Manually triggered job {name} ({job_id})")
        return {
            'success': True,
            'job_id': job_id,
            'message': f'Job {name} started',
        }

    run_scheduled_job_now = run_job_now

    def run_scheduled_generation(self) -> str:
        """Body of the cron tick: one recorded single-post run, executed in the scheduler's thread."""
        job_id = self.gen_service.create_job('scheduled', 1)
        logger.info(f"Starting scheduled blog generation ({job_id})")
        self.gen_service.run_job(job_id, 1)
        return job_id

    # --- Internal helpers ---

    def _build_trigger(self, cron_expression: str) -> CronTrigger:
        try:
            return CronTrigger.from_crontab(cron_expression, timezone=self.settings.schedule_timezone)
        except (ValueError, TypeError, LookupError) as e:
            raise SchedulerConfigError(f"Invalid cron expression '{cron_expression}': {e}") from e

    def _remove(self, name: str):
        self._jobs.pop(name, None)
        try:
            self._scheduler.remove_job(name)
        except JobLookupError:
            pass

    @staticmethod
    def _execute(name: str, func: Callable[[], object]):
        logger.info(f"Running scheduled job: {name}")
        try:
            func()
        except Exception as e:
            logger.error(f"Scheduled job {name} failed: {e}", exc_info=True)
