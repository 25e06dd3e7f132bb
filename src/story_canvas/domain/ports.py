"""Storage ports for stories, ideas, and generation history."""

from __future__ import annotations

from typing import Protocol

from story_canvas.domain.models import ContentGeneration, Idea, Story


class StoryRepository(Protocol):
    """Stores story documents."""

    def create_story(
        self,
        *,
        title: str | None = None,
        content: str | None = None,
        owner_id: int | None = None,
        word_count: int | None = None,
    ) -> Story: ...

    def get_story(self, *, story_id: int) -> Story | None: ...

    def update_story(
        self,
        *,
        story_id: int,
        title: str | None = None,
        content: str | None = None,
        owner_id: int | None = None,
        word_count: int | None = None,
    ) -> Story | None: ...

    def delete_story(self, *, story_id: int) -> bool: ...

    def list_stories(self) -> list[Story]: ...


class IdeaRepository(Protocol):
    """Stores categorized ideas per story."""

    def create_idea(
        self,
        *,
        story_id: int,
        category: str,
        name: str,
        description: str = "",
        is_active: bool = True,
    ) -> Idea: ...

    def get_idea(self, *, idea_id: int) -> Idea | None: ...

    def update_idea(
        self,
        *,
        idea_id: int,
        story_id: int | None = None,
        category: str | None = None,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> Idea | None: ...

    def delete_idea(self, *, idea_id: int) -> bool: ...

    def list_ideas_by_story(self, *, story_id: int) -> list[Idea]: ...


class GenerationRepository(Protocol):
    """Append-only log of content generations."""

    def create_generation(
        self,
        *,
        story_id: int,
        prompt: str,
        generated_content: str,
        used_ideas: tuple[Idea, ...] = (),
    ) -> ContentGeneration: ...

    def get_generation(self, *, generation_id: int) -> ContentGeneration | None: ...

    def list_generations_by_story(self, *, story_id: int) -> list[ContentGeneration]: ...
