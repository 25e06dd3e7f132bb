"""Idea selection and grouping helpers shared by generation and editing."""

from __future__ import annotations

from collections.abc import Iterable

from story_canvas.domain.models import Idea


def active_ideas(ideas: Iterable[Idea]) -> list[Idea]:
    """Keep active ideas in their incoming order."""
    return [idea for idea in ideas if idea.is_active]


def active_idea_names(ideas: Iterable[Idea]) -> list[str]:
    return [idea.name for idea in active_ideas(ideas)]


def group_ideas_by_category(ideas: Iterable[Idea]) -> dict[str, list[Idea]]:
    """Group ideas by category, ordered by first appearance of each category."""
    grouped: dict[str, list[Idea]] = {}
    for idea in ideas:
        grouped.setdefault(idea.category, []).append(idea)
    return grouped
