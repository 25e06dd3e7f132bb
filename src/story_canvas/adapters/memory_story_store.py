"""In-memory persistence for story documents."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

from story_canvas.adapters.memory_table import InMemoryTable
from story_canvas.domain.models import DEFAULT_STORY_TITLE, Story

DEFAULT_OWNER_ID = 1


def _utc_now() -> datetime:
    return datetime.now(UTC)


class InMemoryStoryStore:
    """Persist and query story documents in process memory."""

    def __init__(self) -> None:
        self._table: InMemoryTable[Story] = InMemoryTable()

    def create_story(
        self,
        *,
        title: str | None = None,
        content: str | None = None,
        owner_id: int | None = None,
        word_count: int | None = None,
    ) -> Story:
        """Create a story; unset fields take the documented defaults."""
        now = _utc_now()
        return self._table.insert(
            lambda story_id: Story(
                id=story_id,
                title=DEFAULT_STORY_TITLE if title is None else title,
                content="" if content is None else content,
                owner_id=DEFAULT_OWNER_ID if owner_id is None else owner_id,
                word_count=0 if word_count is None else word_count,
                created_at=now,
                updated_at=now,
            )
        )

    def get_story(self, *, story_id: int) -> Story | None:
        return self._table.get(story_id)

    def update_story(
        self,
        *,
        story_id: int,
        title: str | None = None,
        content: str | None = None,
        owner_id: int | None = None,
        word_count: int | None = None,
    ) -> Story | None:
        """Merge provided fields; return None when the story is missing.

        ``updated_at`` always moves forward, even if no field changed.
        """
        existing = self._table.get(story_id)
        if existing is None:
            return None
        patch: dict[str, object] = {
            key: value
            for key, value in {
                "title": title,
                "content": content,
                "owner_id": owner_id,
                "word_count": word_count,
            }.items()
            if value is not None
        }
        updated_at = max(_utc_now(), existing.updated_at + timedelta(microseconds=1))
        updated = replace(existing, **patch, updated_at=updated_at)
        self._table.replace(story_id, updated)
        return updated

    def delete_story(self, *, story_id: int) -> bool:
        return self._table.delete(story_id)

    def list_stories(self) -> list[Story]:
        return self._table.select()
