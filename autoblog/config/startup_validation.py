"""
Startup Validation Module for Autoblog.

Validates backend credentials, the schedule expression and the duplicate
detection settings before the app or the scheduler starts.
"""

import sys
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum
from urllib.parse import urlparse

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ServiceStatus(Enum):
    """Status of a validated service."""
    AVAILABLE = "available"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"


@dataclass
class ValidationResult:
    """Result of a single validation check."""
    service: str
    status: ServiceStatus
    message: str
    required: bool = True
    details: Optional[Dict[str, Any]] = None


@dataclass
class StartupValidation:
    """Complete startup validation results."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    services: Dict[str, ValidationResult] = field(default_factory=dict)

    def add_result(self, result: ValidationResult):
        """Add a validation result."""
        self.services[result.service] = result

        if result.status == ServiceStatus.UNAVAILABLE:
            if result.required:
                self.is_valid = False
                self.errors.append(f"[{result.service}] {result.message}")
            else:
                self.warnings.append(f"[{result.service}] {result.message}")
        elif result.status == ServiceStatus.DEGRADED:
            self.warnings.append(f"[{result.service}] {result.message}")

    def print_summary(self):
        """Print validation summary."""
        print("\n" + "=" * 60)
        print("Autoblog Startup Validation")
        print("=" * 60)

        for service, result in self.services.items():
            print(f"[{result.status.value.upper():>11}] {service}")
            if result.status != ServiceStatus.AVAILABLE:
                print(f"   -> {result.message}")

        print("-" * 60)

        if self.errors:
            print("\nCRITICAL ERRORS (must fix to start):")
            for error in self.errors:
                print(f"   * {error}")

        if self.warnings:
            print("\nWARNINGS:")
            for warning in self.warnings:
                print(f"   * {warning}")

        if self.is_valid:
            print("\nValidation PASSED")
        else:
            print("\nValidation FAILED - fix errors above before starting")

        print("=" * 60 + "\n")


def validate_llm_backend(settings: Settings) -> ValidationResult:
    """Validate the configured text-generation backend."""
    provider = settings.llm_provider.lower()

    if provider == "gemini":
        api_key = settings.gemini_api_key
        if not api_key:
            return ValidationResult(
                service="Text Backend",
                status=ServiceStatus.UNAVAILABLE,
                message="GEMINI_API_KEY environment variable not set. "
                        "Topic and content generation will not work.",
            )
        if len(api_key) < 20:
            return ValidationResult(
                service="Text Backend",
                status=ServiceStatus.UNAVAILABLE,
                message="GEMINI_API_KEY appears to be invalid (too short).",
            )
        try:
            import google.generativeai  # noqa: F401
        except ImportError:
            return ValidationResult(
                service="Text Backend",
                status=ServiceStatus.UNAVAILABLE,
                message="google-generativeai package not installed. "
                        "Run: pip install google-generativeai",
            )
        return ValidationResult(
            service="Text Backend",
            status=ServiceStatus.AVAILABLE,
            message=f"Gemini configured ({settings.gemini_model})",
        )

    if provider == "ollama":
        parsed = urlparse(settings.ollama_host)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return ValidationResult(
                service="Text Backend",
                status=ServiceStatus.UNAVAILABLE,
                message=f"OLLAMA_HOST is not a valid URL: {settings.ollama_host}",
            )
        return ValidationResult(
            service="Text Backend",
            status=ServiceStatus.AVAILABLE,
            message=f"Ollama configured ({settings.ollama_model} at {settings.ollama_host})",
        )

    return ValidationResult(
        service="Text Backend",
        status=ServiceStatus.UNAVAILABLE,
        message=f"Unknown LLM_PROVIDER '{settings.llm_provider}'. Use 'gemini' or 'ollama'.",
    )


def validate_schedule(settings: Settings) -> ValidationResult:
    """Validate the cron expression used by the scheduler."""
    if not settings.schedule_enabled:
        return ValidationResult(
            service="Scheduler",
            status=ServiceStatus.DEGRADED,
            message="SCHEDULE_ENABLED is false. Posts are only generated on request.",
            required=False,
        )

    from apscheduler.triggers.cron import CronTrigger

    try:
        CronTrigger.from_crontab(settings.schedule_interval, timezone=settings.schedule_timezone)
    except (ValueError, LookupError) as e:
        return ValidationResult(
            service="Scheduler",
            status=ServiceStatus.UNAVAILABLE,
            message=f"Invalid SCHEDULE_INTERVAL '{settings.schedule_interval}': {e}",
            required=False,
        )

    return ValidationResult(
        service="Scheduler",
        status=ServiceStatus.AVAILABLE,
        message=f"Scheduled with '{settings.schedule_interval}' ({settings.schedule_timezone})",
    )


def validate_similarity_strategy(settings: Settings) -> ValidationResult:
    """Validate the duplicate-detection strategy."""
    strategy = settings.similarity_strategy.lower()

    if strategy == "lexical":
        return ValidationResult(
            service="Similarity Oracle",
            status=ServiceStatus.AVAILABLE,
            message="Text relevance search",
        )

    if strategy == "embedding":
        if settings.embedding_provider.lower() not in ("sentence-transformers", "ollama"):
            return ValidationResult(
                service="Similarity Oracle",
                status=ServiceStatus.UNAVAILABLE,
                message=f"Unknown EMBEDDING_PROVIDER '{settings.embedding_provider}'.",
            )
        return ValidationResult(
            service="Similarity Oracle",
            status=ServiceStatus.AVAILABLE,
            message=f"Embedding similarity via {settings.embedding_provider}",
        )

    return ValidationResult(
        service="Similarity Oracle",
        status=ServiceStatus.UNAVAILABLE,
        message=f"Unknown SIMILARITY_STRATEGY '{settings.similarity_strategy}'. "
                "Use 'lexical' or 'embedding'.",
    )


def validate_flask_config(settings: Settings) -> ValidationResult:
    """Validate Flask configuration."""
    if settings.flask_secret_key == Settings.model_fields["flask_secret_key"].default:
        return ValidationResult(
            service="Flask Config",
            status=ServiceStatus.DEGRADED,
            message="FLASK_SECRET_KEY not set. Using development default.",
            required=False,
        )

    return ValidationResult(
        service="Flask Config",
        status=ServiceStatus.AVAILABLE,
        message="Flask configuration valid",
    )


def run_startup_validation(
    settings: Optional[Settings] = None,
    exit_on_failure: bool = False,
    print_summary: bool = True,
) -> StartupValidation:
    """
    Run complete startup validation.

    Args:
        settings: Settings to validate (defaults to the environment)
        exit_on_failure: Exit process if validation fails
        print_summary: Print validation summary

    Returns:
        StartupValidation with all results
    """
    settings = settings or get_settings()
    validation = StartupValidation()

    validation.add_result(validate_llm_backend(settings))
    validation.add_result(validate_similarity_strategy(settings))
    validation.add_result(validate_schedule(settings))
    validation.add_result(validate_flask_config(settings))

    if print_summary:
        validation.print_summary()

    if exit_on_failure and not validation.is_valid:
        logger.error("Startup validation failed. Exiting.")
        sys.exit(1)

    return validation
