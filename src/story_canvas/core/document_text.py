"""Plain-text helpers over serialized story HTML."""

from __future__ import annotations

import html
import re

_MARKUP_TAG = re.compile(r"<[^>]*>")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def count_words(content: str) -> int:
    """Count whitespace-separated words after replacing markup tags with spaces."""
    if not content:
        return 0
    return len(_MARKUP_TAG.sub(" ", content).split())


def append_paragraphs(content: str, text: str) -> str:
    """Append generated plain text to HTML content as escaped paragraphs."""
    paragraphs = [chunk.strip() for chunk in _PARAGRAPH_BREAK.split(text)]
    paragraphs = [chunk for chunk in paragraphs if chunk]
    if not paragraphs:
        return content
    rendered = "".join(f"<p>{html.escape(chunk, quote=False)}</p>" for chunk in paragraphs)
    return f"{content}{rendered}"
