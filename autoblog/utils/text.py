"""Text helpers shared by the generators, the oracle and the models."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_CODE_FENCE = re.compile(r"```[a-zA-Z0-9_+-]*\n|```")


def derive_slug(text: str) -> str:
    """
    Build a URL slug from a title.

    Lowercases, turns every run of characters outside [a-z0-9] into a single
    hyphen and strips leading/trailing hyphens.
    """
    if not text:
        return ""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def count_words(content: str) -> int:
    """Whitespace-token count of a body of text."""
    if not content:
        return 0
    return len(content.split())


def format_content(content: str) -> str:
    """
    Clean up generated article text.

    Collapses three or more consecutive newlines into one blank line and
    removes code-fence markers the model sometimes wraps its answer in.
    """
    if not content:
        return ""
    text = _EXCESS_NEWLINES.sub("\n\n", content)
    text = _CODE_FENCE.sub("", text)
    # fence removal can leave new runs of blank lines behind
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()
