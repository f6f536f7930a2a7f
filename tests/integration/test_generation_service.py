"""
Integration tests for the Generation Service.
"""

from unittest.mock import MagicMock, patch

import pytest

from autoblog.config import CATEGORY_TREE


@pytest.mark.integration
class TestGenerateAndPublish:
    """End-to-end runs against the fake backend and a real database."""

    def test_draft_post_in_requested_category(self, gen_service):
        result = gen_service.generate_and_publish_post({"category": "Tech", "auto_publish": False})

        assert result["success"] is True
        post = result["post"]
        assert post["status"] == "draft"
        assert post["category"] == "Tech"
        assert post["subcategory"] == "General"
        assert post["slug"] == "fresh-perspectives-volume-1-edition"
        assert post["word_count"] > 0
        assert "Fresh Perspectives Volume 1 Edition" in result["message"]

    def test_auto_publish(self, gen_service):
        result = gen_service.generate_and_publish_post({"category": "Technology", "auto_publish": True})

        assert result["post"]["status"] == "published"
        assert result["post"]["subcategory"] in CATEGORY_TREE["Technology"]

    def test_content_is_formatted(self, gen_service, fake_backend):
        fake_backend.contents = ["```markdown\n# Heading\n\n\n\nBody paragraph\n```"]

        result = gen_service.generate_and_publish_post()

        assert result["post"]["content"] == "# Heading\n\nBody paragraph"

    def test_duplicate_title_skipped(self, gen_service, fake_backend, sample_article):
        fake_backend.titles = ["Getting Started With Python", "Baking Bread at Home"]

        result = gen_service.generate_and_publish_post({"category": "Food", "subcategory": "Baking"})

        assert result["success"] is True
        assert result["post"]["title"] == "Baking Bread at Home"
        assert fake_backend.topic_calls == 2

    def test_topic_attempts_exhausted(self, gen_service, fake_backend, sample_article):
        fake_backend.titles = ["Getting Started With Python"] * 10

        result = gen_service.generate_and_publish_post()

        assert result["success"] is False
        assert "unique topic after 10 attempts" in result["error"]
        assert result["message"] == "Failed to generate blog post"

    def test_similar_content_flagged(self, gen_service, fake_backend, sample_article):
        fake_backend.contents = [sample_article.content] * 4

        result = gen_service.generate_and_publish_post()

        assert result["success"] is True
        assert result["post"]["similarity_warning"] is True
        assert result["post"]["similar_post_id"] == sample_article.id
        assert fake_backend.content_calls == 4

    def test_invalid_options_become_failure(self, gen_service):
        result = gen_service.generate_and_publish_post({"min_words": 900, "max_words": 100})

        assert result["success"] is False
        assert "max_words" in result["error"]

    def test_unexpected_error_becomes_failure(self, gen_service):
        gen_service.publisher.save_post = MagicMock(side_effect=RuntimeError("disk full"))

        result = gen_service.generate_and_publish_post()

        assert result == {
            "success": False,
            "error": "disk full",
            "message": "Failed to generate blog post",
        }


@pytest.mark.integration
class TestGenerateBatch:
    """Tests for sequential batches."""

    def test_failure_isolated_to_one_item(self, gen_service, fake_backend):
        fake_backend.fail_topic_calls = {2}

        results = gen_service.generate_batch(3, {"category": "Tech"})

        assert [r["success"] for r in results] == [True, False, True]
        assert "service unavailable" in results[1]["error"]

    def test_escaping_exception_becomes_failure_result(self, gen_service):
        real_run = gen_service.generate_and_publish_post
        calls = []

        def run(options=None):
            calls.append(options)
            if len(calls) == 2:
                raise RuntimeError("worker crashed")
            return real_run(options)

        sleep = MagicMock()
        gen_service._sleep = sleep
        gen_service.batch_delay = 1

        with patch.object(gen_service, "generate_and_publish_post", side_effect=run):
            results = gen_service.generate_batch(3, {"category": "Tech"})

        assert [r["success"] for r in results] == [True, False, True]
        assert results[1] == {
            "success": False,
            "error": "worker crashed",
            "message": "Failed to generate blog post",
        }
        assert sleep.call_count == 2

    def test_delay_between_runs_only(self, gen_service):
        sleep = MagicMock()
        gen_service._sleep = sleep
        gen_service.batch_delay = 5

        gen_service.generate_batch(3)

        assert sleep.call_count == 2
        sleep.assert_called_with(5)

    def test_zero_count(self, gen_service):
        assert gen_service.generate_batch(0) == []


@pytest.mark.integration
class TestBackgroundJobs:
    """Tests for job records and worker threads."""

    def test_start_batch_job_spawns_thread(self, gen_service):
        with patch("blogapp.services.generation_service.threading.Thread") as mock_thread:
            mock_thread.return_value = MagicMock()

            job_id = gen_service.start_batch_job(2, {"category": "Tech"})

            assert job_id.startswith("job-")
            mock_thread.assert_called_once()
            assert mock_thread.call_args.kwargs["daemon"] is True

        status = gen_service.get_job_status(job_id)
        assert status["status"] == "pending"
        assert status["kind"] == "batch"
        assert status["requested_count"] == 2
        assert status["options"] == {"category": "Tech"}

    def test_run_job_records_results(self, gen_service, fake_backend):
        fake_backend.fail_topic_calls = {2}
        job_id = gen_service.create_job("batch", 3)

        gen_service.run_job(job_id, 3)

        status = gen_service.get_job_status(job_id)
        assert status["status"] == "completed"
        assert status["succeeded_count"] == 2
        assert status["failed_count"] == 1
        assert [r["success"] for r in status["results"]] == [True, False, True]
        assert status["results"][0]["slug"]
        assert status["completed_at"] is not None
        assert job_id not in gen_service.running_job_ids()

    def test_all_failures_mark_job_failed(self, gen_service, fake_backend):
        fake_backend.fail_topic_calls = {1}
        job_id = gen_service.create_job("single", 1)

        gen_service.run_job(job_id, 1)

        status = gen_service.get_job_status(job_id)
        assert status["status"] == "failed"
        assert "service unavailable" in status["error"]

    def test_crash_marks_job_failed(self, gen_service):
        job_id = gen_service.create_job("single", 1)
        gen_service.generate_batch = MagicMock(side_effect=RuntimeError("worker crashed"))

        gen_service.run_job(job_id, 1)

        status = gen_service.get_job_status(job_id)
        assert status["status"] == "failed"
        assert status["error"] == "worker crashed"

    def test_background_thread_completes(self, gen_service):
        job_id = gen_service.start_background_job("single", 1)

        thread = gen_service._running_jobs.get(job_id)
        if thread is not None:
            thread.join(timeout=30)

        assert gen_service.get_job_status(job_id)["status"] == "completed"

    def test_unknown_kind(self, gen_service):
        with pytest.raises(ValueError):
            gen_service.create_job("hourly")

    def test_get_job_status_not_found(self, gen_service):
        assert gen_service.get_job_status("non-existent-job") is None
