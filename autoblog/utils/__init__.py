"""Shared helpers"""

from .text import derive_slug, count_words, format_content

__all__ = ["derive_slug", "count_words", "format_content"]
