"""
Exception hierarchy for the generation pipeline.

Generators and the publisher raise these; the public pipeline operations
catch them at their boundary and turn them into failure envelopes.
"""


class AutoblogError(Exception):
    """Base class for all pipeline errors."""
    pass


class BackendError(AutoblogError):
    """The text-generation or embedding backend failed."""
    pass


class GenerationError(AutoblogError):
    """A generation step could not produce a usable result."""
    pass


class TopicGenerationError(GenerationError):
    """No usable topic could be produced."""
    pass


class DuplicateTopicError(TopicGenerationError):
    """Every topic attempt was rejected as a duplicate."""

    def __init__(self, attempts: int, last_title: str = ""):
        self.attempts = attempts
        self.last_title = last_title
        super().__init__(
            f"Could not generate a unique topic after {attempts} attempts"
            + (f' (last rejected: "{last_title}")' if last_title else "")
        )


class ContentGenerationError(GenerationError):
    """Article content could not be generated."""
    pass


class ValidationError(AutoblogError):
    """A record is missing required fields."""
    pass


class DuplicateArticleError(AutoblogError):
    """The store rejected an article whose title or slug already exists."""
    pass


class ArticleNotFoundError(AutoblogError):
    """No article matches the given id or slug."""
    pass


class SchedulerConfigError(AutoblogError):
    """The schedule expression is invalid."""
    pass
