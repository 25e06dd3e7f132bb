"""In-memory persistence for story ideas."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from story_canvas.adapters.memory_table import InMemoryTable
from story_canvas.domain.models import Idea


class InMemoryIdeaStore:
    """Persist and query categorized ideas in process memory."""

    def __init__(self) -> None:
        self._table: InMemoryTable[Idea] = InMemoryTable()

    def create_idea(
        self,
        *,
        story_id: int,
        category: str,
        name: str,
        description: str = "",
        is_active: bool = True,
    ) -> Idea:
        """Create an idea; names and categories need not be unique."""
        now = datetime.now(UTC)
        return self._table.insert(
            lambda idea_id: Idea(
                id=idea_id,
                story_id=story_id,
                category=category,
                name=name,
                description=description,
                is_active=is_active,
                created_at=now,
            )
        )

    def get_idea(self, *, idea_id: int) -> Idea | None:
        return self._table.get(idea_id)

    def update_idea(
        self,
        *,
        idea_id: int,
        story_id: int | None = None,
        category: str | None = None,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> Idea | None:
        """Merge provided fields over an existing idea; None when missing."""
        existing = self._table.get(idea_id)
        if existing is None:
            return None
        patch: dict[str, object] = {
            key: value
            for key, value in {
                "story_id": story_id,
                "category": category,
                "name": name,
                "description": description,
                "is_active": is_active,
            }.items()
            if value is not None
        }
        updated = replace(existing, **patch)
        self._table.replace(idea_id, updated)
        return updated

    def delete_idea(self, *, idea_id: int) -> bool:
        return self._table.delete(idea_id)

    def list_ideas_by_story(self, *, story_id: int) -> list[Idea]:
        return self._table.select(lambda idea: idea.story_id == story_id)
