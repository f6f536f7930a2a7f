"""
Unit tests for the blog generation scheduler.
"""

from unittest.mock import MagicMock

import pytest

from autoblog.exceptions import SchedulerConfigError
from blogapp.scheduler import BLOG_GENERATION_JOB, BlogScheduler


@pytest.fixture
def gen_service_mock():
    service = MagicMock()
    service.start_background_job.return_value = "job-1234abcd"
    service.create_job.return_value = "job-sched001"
    return service


@pytest.fixture
def blog_scheduler(gen_service_mock, test_settings):
    scheduler = BlogScheduler(gen_service_mock, test_settings)
    yield scheduler
    scheduler.shutdown(wait=False)


@pytest.mark.unit
class TestScheduleJob:
    """Tests for job registration."""

    def test_schedule_job(self, blog_scheduler):
        blog_scheduler.schedule_job("digest", "0 8 * * *", lambda: None)

        jobs = blog_scheduler.get_scheduled_jobs()
        assert [job["name"] for job in jobs] == ["digest"]

    def test_rescheduling_replaces_job(self, blog_scheduler):
        blog_scheduler.schedule_job("digest", "0 8 * * *", lambda: None)
        blog_scheduler.schedule_job("digest", "30 9 * * *", lambda: None)

        assert len(blog_scheduler.get_scheduled_jobs()) == 1
        assert len(blog_scheduler._scheduler.get_jobs()) == 1
        assert "9" in blog_scheduler.get_scheduled_jobs()[0]["trigger"]

    def test_invalid_cron(self, blog_scheduler):
        with pytest.raises(SchedulerConfigError):
            blog_scheduler.schedule_job("digest", "every morning", lambda: None)
        assert blog_scheduler.get_scheduled_jobs() == []

    def test_stop_job(self, blog_scheduler):
        blog_scheduler.schedule_job("digest", "0 8 * * *", lambda: None)

        assert blog_scheduler.stop_job("digest") is True
        assert blog_scheduler.stop_job("digest") is False
        assert blog_scheduler.get_scheduled_jobs() == []

    def test_stop_all_jobs(self, blog_scheduler):
        blog_scheduler.schedule_job("a", "0 8 * * *", lambda: None)
        blog_scheduler.schedule_job("b", "0 9 * * *", lambda: None)

        blog_scheduler.stop_all_jobs()

        assert blog_scheduler.get_scheduled_jobs() == []
        assert blog_scheduler._scheduler.get_jobs() == []


@pytest.mark.unit
class TestStart:
    """Tests for scheduler start-up."""

    def test_disabled(self, blog_scheduler):
        assert blog_scheduler.start() is False
        assert blog_scheduler.running is False

    def test_invalid_cron_aborts_start(self, gen_service_mock, test_settings):
        settings = test_settings.model_copy(update={"schedule_enabled": True, "schedule_interval": "0 */6 * *"})
        scheduler = BlogScheduler(gen_service_mock, settings)

        assert scheduler.start() is False
        assert scheduler.running is False

    def test_start_registers_generation_job(self, gen_service_mock, test_settings):
        settings = test_settings.model_copy(update={"schedule_enabled": True})
        scheduler = BlogScheduler(gen_service_mock, settings)
        try:
            assert scheduler.start() is True
            assert scheduler.running is True

            jobs = scheduler.get_scheduled_jobs()
            assert [job["id"] for job in jobs] == [BLOG_GENERATION_JOB]
            assert jobs[0]["next_run"] is not None
        finally:
            scheduler.shutdown(wait=False)
        assert scheduler.running is False


@pytest.mark.unit
class TestRunJobNow:
    """Tests for manual triggering."""

    def test_known_job_returns_immediately(self, blog_scheduler, gen_service_mock):
        result = blog_scheduler.run_job_now(BLOG_GENERATION_JOB)

        assert result["success"] is True
        assert result["job_id"] == "job-1234abcd"
        gen_service_mock.start_background_job.assert_called_once_with("single", 1)

    def test_alias(self, blog_scheduler):
        assert blog_scheduler.run_scheduled_job_now(BLOG_GENERATION_JOB)["success"] is True

    def test_unknown_job(self, blog_scheduler, gen_service_mock):
        result = blog_scheduler.run_job_now("weeklyDigest")

        assert result["success"] is False
        assert "Unknown job" in result["error"]
        gen_service_mock.start_background_job.assert_not_called()

    def test_start_failure_becomes_envelope(self, blog_scheduler, gen_service_mock):
        gen_service_mock.start_background_job.side_effect = RuntimeError("database is locked")

        result = blog_scheduler.run_job_now(BLOG_GENERATION_JOB)

        assert result["success"] is False
        assert result["error"] == "database is locked"


@pytest.mark.unit
class TestScheduledRun:
    """Tests for the cron tick body."""

    def test_scheduled_generation_records_job(self, blog_scheduler, gen_service_mock):
        job_id = blog_scheduler.run_scheduled_generation()

        assert job_id == "job-sched001"
        gen_service_mock.create_job.assert_called_once_with("scheduled", 1)
        gen_service_mock.run_job.assert_called_once_with("job-sched001", 1)

    def test_job_errors_are_contained(self):
        def boom():
            raise RuntimeError("boom")

        BlogScheduler._execute("digest", boom)
