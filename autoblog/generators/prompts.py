"""
Prompt templates for topic and article generation
"""

from typing import Optional

TOPIC_INSTRUCTION = (
    "Generate a single unique, engaging blog post topic with a title, category, and subcategory. "
    "Don't include any other text. The title should be catchy and relevant to the category and subcategory."
)

TOPIC_OUTPUT_FORMAT = (
    'Respond with JSON only, in this exact shape: '
    '{"title": "...", "category": "...", "subcategory": "..."}'
)

CREATIVITY_BOOST = " Be more creative and think outside the box."


def build_topic_prompt(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    keywords: Optional[list[str]] = None,
    avoid_title: Optional[str] = None,
    retry: int = 0,
) -> str:
    """Build the instruction for one topic attempt"""
    prompt = TOPIC_INSTRUCTION

    if category:
        prompt += f" The category should be {category}."

    if subcategory:
        prompt += f" The subcategory should be {subcategory}."

    if keywords:
        prompt += f" Include some of these keywords if possible: {', '.join(keywords)}."

    if avoid_title:
        prompt += f' Avoid anything similar to "{avoid_title}".'

    if retry > 2:
        prompt += CREATIVITY_BOOST

    return prompt


def with_topic_selection(prompt: str, category: str, subcategory: str) -> str:
    """Merge the chosen category pair and the output format into a topic prompt"""
    return f"{prompt}, Category: {category}, Subcategory: {subcategory}\n\n{TOPIC_OUTPUT_FORMAT}"


def build_content_prompt(
    title: str,
    category: Optional[str],
    subcategory: Optional[str],
    min_words: int,
    max_words: int,
    tone: str,
    avoid: Optional[dict] = None,
) -> str:
    """
    Build the instruction for an article body.

    ``avoid`` describes an existing article the new text must not resemble:
    ``{"id": ..., "title": ..., "excerpt": ...}``; title and excerpt are optional.
    """
    prompt = f"""Generate a detailed blog post with the following details:
Title: "{title}"
Category: {category or "General"}
Subcategory: {subcategory or "General"}
Tone: {tone}
Word count: between {min_words} and {max_words} words.

Please include an engaging introduction, at least 3 informative sections with headings, and a conclusion.
Use markdown formatting. Include practical examples where appropriate."""

    if avoid:
        reference = f"an existing article (id {avoid.get('id')})"
        if avoid.get("title"):
            reference = f'the existing article "{avoid["title"]}"'

        prompt += f"""

IMPORTANT: Your content must be COMPLETELY DIFFERENT from {reference}.
Take a totally different approach, use different examples, and structure the article differently."""

        if avoid.get("excerpt"):
            prompt += f"""
It begins like this:

{avoid["excerpt"]}"""

    prompt += "\n\nReturn only the content (no metadata or explanation)."
    return prompt
