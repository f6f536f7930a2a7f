"""Data models passed between pipeline stages"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_MIN_WORDS = 600
DEFAULT_MAX_WORDS = 2000
DEFAULT_TONE = "informative"


class GenerationOptions(BaseModel):
    """What the caller asked for when requesting a new post"""

    category: Optional[str] = None
    subcategory: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    min_words: int = Field(default=DEFAULT_MIN_WORDS, ge=1)
    max_words: int = Field(default=DEFAULT_MAX_WORDS, ge=1)
    tone: Optional[str] = DEFAULT_TONE
    auto_publish: bool = False

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [k.strip() for k in value.split(",") if k.strip()]
        return value

    @field_validator("category", "subcategory", "tone", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def check_word_bounds(self):
        if self.tone is None:
            self.tone = DEFAULT_TONE
        if self.max_words < self.min_words:
            raise ValueError("max_words must be greater than or equal to min_words")
        return self


class Topic(BaseModel):
    """A candidate post topic"""

    title: str
    category: str
    subcategory: str


class GeneratedContent(BaseModel):
    """Article text plus the outcome of its similarity checks"""

    content: str
    similarity_score: float = 0.0
    similarity_warning: bool = False
    similar_post_id: Optional[int] = None
    attempts: int = 1
