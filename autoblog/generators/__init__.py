"""Topic and article generators"""

from .topic_generator import TopicGenerator
from .content_generator import ContentGenerator
from .prompts import build_topic_prompt, build_content_prompt

__all__ = [
    "TopicGenerator",
    "ContentGenerator",
    "build_topic_prompt",
    "build_content_prompt",
]
