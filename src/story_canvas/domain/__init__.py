"""Domain records and storage ports for story canvas workspaces."""

from story_canvas.domain.models import (
    DEFAULT_STORY_TITLE,
    GENERATION_STYLES,
    ContentGeneration,
    GenerationStyle,
    Idea,
    Story,
)
from story_canvas.domain.ports import GenerationRepository, IdeaRepository, StoryRepository

__all__ = [
    "DEFAULT_STORY_TITLE",
    "GENERATION_STYLES",
    "ContentGeneration",
    "GenerationRepository",
    "GenerationStyle",
    "Idea",
    "IdeaRepository",
    "Story",
    "StoryRepository",
]
