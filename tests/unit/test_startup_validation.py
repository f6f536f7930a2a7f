"""
Unit tests for settings and startup validation.
"""

import os
from unittest.mock import patch

import pytest

from autoblog.config import Settings
from autoblog.config.startup_validation import (
    ServiceStatus,
    run_startup_validation,
    validate_flask_config,
    validate_llm_backend,
    validate_schedule,
    validate_similarity_strategy,
)


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


@pytest.mark.unit
class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = make_settings()

        assert settings.llm_provider == "gemini"
        assert settings.similarity_strategy == "lexical"
        assert settings.content_similarity_threshold == 0.5
        assert settings.max_topic_attempts == 10
        assert settings.max_content_retries == 3
        assert settings.max_batch_size == 10
        assert settings.schedule_interval == "0 */6 * * *"
        assert settings.port == 3000

    def test_environment_overrides(self):
        env = {"LLM_PROVIDER": "ollama", "SCHEDULE_ENABLED": "true", "MAX_BATCH_SIZE": "3"}
        with patch.dict(os.environ, env, clear=True):
            settings = make_settings()

        assert settings.llm_provider == "ollama"
        assert settings.schedule_enabled is True
        assert settings.max_batch_size == 3

    def test_negative_retries_rejected(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            make_settings(max_content_retries=-1)


@pytest.mark.unit
class TestLLMBackendValidation:
    """Tests for text backend validation."""

    def test_missing_api_key(self):
        result = validate_llm_backend(make_settings(gemini_api_key=None))
        assert result.status == ServiceStatus.UNAVAILABLE
        assert "GEMINI_API_KEY" in result.message

    def test_short_api_key(self):
        result = validate_llm_backend(make_settings(gemini_api_key="short"))
        assert result.status == ServiceStatus.UNAVAILABLE
        assert "invalid" in result.message.lower()

    def test_valid_api_key(self):
        result = validate_llm_backend(make_settings(gemini_api_key="a" * 40))
        assert result.status == ServiceStatus.AVAILABLE

    def test_ollama_host(self):
        ok = validate_llm_backend(make_settings(llm_provider="ollama"))
        bad = validate_llm_backend(make_settings(llm_provider="ollama", ollama_host="localhost"))

        assert ok.status == ServiceStatus.AVAILABLE
        assert bad.status == ServiceStatus.UNAVAILABLE

    def test_unknown_provider(self):
        result = validate_llm_backend(make_settings(llm_provider="gpt"))
        assert result.status == ServiceStatus.UNAVAILABLE


@pytest.mark.unit
class TestScheduleValidation:
    """Tests for cron validation."""

    def test_disabled_is_degraded(self):
        result = validate_schedule(make_settings(schedule_enabled=False))
        assert result.status == ServiceStatus.DEGRADED
        assert result.required is False

    def test_valid_cron(self):
        result = validate_schedule(make_settings(schedule_enabled=True, schedule_interval="*/15 * * * *"))
        assert result.status == ServiceStatus.AVAILABLE

    def test_invalid_cron_is_not_required(self):
        result = validate_schedule(make_settings(schedule_enabled=True, schedule_interval="every hour"))
        assert result.status == ServiceStatus.UNAVAILABLE
        assert result.required is False


@pytest.mark.unit
class TestOtherValidation:
    """Tests for similarity strategy and Flask checks."""

    def test_similarity_strategies(self):
        assert validate_similarity_strategy(make_settings()).status == ServiceStatus.AVAILABLE
        assert validate_similarity_strategy(
            make_settings(similarity_strategy="embedding")
        ).status == ServiceStatus.AVAILABLE
        assert validate_similarity_strategy(
            make_settings(similarity_strategy="fuzzy")
        ).status == ServiceStatus.UNAVAILABLE

    def test_default_secret_key_is_degraded(self):
        with patch.dict(os.environ, {}, clear=True):
            result = validate_flask_config(make_settings())
        assert result.status == ServiceStatus.DEGRADED

    def test_custom_secret_key(self):
        result = validate_flask_config(make_settings(flask_secret_key="something-long-and-random"))
        assert result.status == ServiceStatus.AVAILABLE


@pytest.mark.unit
class TestRunStartupValidation:
    """Tests for the combined validation run."""

    def test_valid_configuration(self, test_settings):
        validation = run_startup_validation(test_settings, print_summary=False)

        assert validation.is_valid is True
        assert "Text Backend" in validation.services
        assert any("Scheduler" in w for w in validation.warnings)

    def test_missing_key_invalidates(self):
        validation = run_startup_validation(make_settings(gemini_api_key=None), print_summary=False)

        assert validation.is_valid is False
        assert any("GEMINI_API_KEY" in e for e in validation.errors)

    def test_exit_on_failure(self):
        with pytest.raises(SystemExit):
            run_startup_validation(
                make_settings(gemini_api_key=None), exit_on_failure=True, print_summary=False
            )
