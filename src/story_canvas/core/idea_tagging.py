"""Tagging pass that highlights active idea names inside story HTML.

The pass works on the parsed document tree rather than on the raw markup:
only text nodes are searched, so tag names, attribute values, comments, and
text already wrapped by an earlier pass are never matched. Re-tagging output
with the same names is therefore a no-op.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

IDEA_TAG_CLASS = "idea-tag"
IDEA_TAG_CLASSES = "idea-tag text-gray-800 bg-gray-100 px-1 rounded"
IDEA_INDICATOR_CLASS = "idea-indicator"

_SKIPPED_PARENTS = {"script", "style", "textarea"}


def idea_name_pattern(name: str) -> re.Pattern[str]:
    """Case-sensitive, word-boundary anchored pattern for one idea name."""
    return re.compile(rf"\b{re.escape(name)}\b")


def tag_idea_mentions(html_content: str, active_idea_names: Sequence[str]) -> str:
    """Wrap every occurrence of each active idea name in highlight markup.

    Names are applied in the order given. Returns ``html_content`` itself when
    nothing was wrapped, so callers can compare by identity or equality to
    detect a real change.
    """
    names = [name for name in active_idea_names if name.strip()]
    if not names or not html_content:
        return html_content

    soup = BeautifulSoup(html_content, "html.parser")
    changed = False
    for name in names:
        pattern = idea_name_pattern(name)
        for text_node in _taggable_text_nodes(soup):
            if _wrap_matches(soup, text_node, pattern):
                changed = True
    if not changed:
        return html_content
    return str(soup)


def _taggable_text_nodes(soup: BeautifulSoup) -> list[NavigableString]:
    nodes: list[NavigableString] = []
    for node in soup.find_all(string=True):
        # Comment, CData, Doctype and friends are NavigableString subclasses.
        if type(node) is not NavigableString:
            continue
        if _inside_skipped_element(node):
            continue
        nodes.append(node)
    return nodes


def _inside_skipped_element(node: PageElement) -> bool:
    for parent in node.parents:
        if not isinstance(parent, Tag):
            continue
        if parent.name in _SKIPPED_PARENTS:
            return True
        if parent.name == "span" and IDEA_TAG_CLASS in _class_names(parent):
            return True
    return False


def _class_names(tag: Tag) -> list[str]:
    raw = tag.get("class")
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split()
    return list(raw)


def _wrap_matches(soup: BeautifulSoup, text_node: NavigableString, pattern: re.Pattern[str]) -> bool:
    text = str(text_node)
    matches = list(pattern.finditer(text))
    if not matches:
        return False

    pieces: list[PageElement] = []
    cursor = 0
    for match in matches:
        if match.start() > cursor:
            pieces.append(NavigableString(text[cursor : match.start()]))
        pieces.append(_idea_span(soup, match.group(0)))
        cursor = match.end()
    if cursor < len(text):
        pieces.append(NavigableString(text[cursor:]))
    text_node.replace_with(*pieces)
    return True


def _idea_span(soup: BeautifulSoup, label: str) -> Tag:
    span = soup.new_tag("span", attrs={"class": IDEA_TAG_CLASSES})
    span.append(NavigableString(label))
    span.append(soup.new_tag("span", attrs={"class": IDEA_INDICATOR_CLASS}))
    return span


def strip_idea_tags(html_content: str) -> str:
    """Remove highlight markup added by ``tag_idea_mentions``.

    Indicator spans are dropped and idea spans are replaced by their text, so
    the result is the document as the author wrote it.
    """
    if not html_content or IDEA_TAG_CLASS not in html_content:
        return html_content

    soup = BeautifulSoup(html_content, "html.parser")
    idea_spans = [
        span for span in soup.find_all("span") if IDEA_TAG_CLASS in _class_names(span)
    ]
    if not idea_spans:
        return html_content
    for span in idea_spans:
        for indicator in span.find_all("span"):
            if IDEA_INDICATOR_CLASS in _class_names(indicator):
                indicator.decompose()
        span.unwrap()
    return str(soup)
