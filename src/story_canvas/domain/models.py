"""Core story canvas domain records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

DEFAULT_STORY_TITLE = "Untitled Story"

GenerationStyle = Literal["detailed", "concise", "poetic"]
GENERATION_STYLES: tuple[GenerationStyle, ...] = ("detailed", "concise", "poetic")


@dataclass(frozen=True)
class Story:
    """A story document with serialized HTML content."""

    id: int
    title: str
    content: str
    owner_id: int
    word_count: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Idea:
    """A named, categorized tag for a recurring story element."""

    id: int
    story_id: int
    category: str
    name: str
    description: str
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class ContentGeneration:
    """One prompt-to-text invocation, kept as an append-only audit record."""

    id: int
    story_id: int
    prompt: str
    generated_content: str
    used_ideas: tuple[Idea, ...]
    created_at: datetime
