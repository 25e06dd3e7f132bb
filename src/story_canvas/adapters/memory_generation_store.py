"""Append-only in-memory log of content generations."""

from __future__ import annotations

from datetime import UTC, datetime

from story_canvas.adapters.memory_table import InMemoryTable
from story_canvas.domain.models import ContentGeneration, Idea


class InMemoryGenerationStore:
    """Record generations; records are never mutated or deleted."""

    def __init__(self) -> None:
        self._table: InMemoryTable[ContentGeneration] = InMemoryTable()

    def create_generation(
        self,
        *,
        story_id: int,
        prompt: str,
        generated_content: str,
        used_ideas: tuple[Idea, ...] = (),
    ) -> ContentGeneration:
        now = datetime.now(UTC)
        return self._table.insert(
            lambda generation_id: ContentGeneration(
                id=generation_id,
                story_id=story_id,
                prompt=prompt,
                generated_content=generated_content,
                used_ideas=tuple(used_ideas),
                created_at=now,
            )
        )

    def get_generation(self, *, generation_id: int) -> ContentGeneration | None:
        return self._table.get(generation_id)

    def list_generations_by_story(self, *, story_id: int) -> list[ContentGeneration]:
        return self._table.select(lambda generation: generation.story_id == story_id)
