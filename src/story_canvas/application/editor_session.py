"""Headless document-editor session: tagging, word count, save, and generation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Protocol

from story_canvas.core.document_text import append_paragraphs, count_words
from story_canvas.core.idea_tagging import strip_idea_tags, tag_idea_mentions
from story_canvas.core.typewriter import TypewriterReveal
from story_canvas.domain.models import DEFAULT_STORY_TITLE, GenerationStyle

DEFAULT_GENERATION_COOLDOWN_SECONDS = 3.5

logger = logging.getLogger(__name__)


class GenerationInProgressError(RuntimeError):
    """Raised when a generation is requested while another is still showing."""


class EditorBackend(Protocol):
    """Remote operations the editor needs; satisfied by ``StoryCanvasClient``."""

    def update_story(
        self,
        *,
        story_id: int,
        title: str | None = None,
        content: str | None = None,
        word_count: int | None = None,
    ) -> object: ...

    def generate_content(
        self,
        *,
        story_id: int,
        prompt: str,
        use_ideas: bool,
        style: GenerationStyle,
    ) -> str: ...


class EditorSession:
    """Editing state for one story document.

    Content changes run the idea-tagging pass and recompute the word count
    over the untagged text, so highlighting never changes the count.
    While a generation is outstanding, and for a fixed cooldown after it
    completes, new generation requests are refused; content edits are not.
    """

    def __init__(
        self,
        *,
        story_id: int,
        backend: EditorBackend,
        title: str = DEFAULT_STORY_TITLE,
        content: str = "",
        active_idea_names: Sequence[str] = (),
        generation_cooldown_seconds: float = DEFAULT_GENERATION_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.story_id = story_id
        self.title = title or DEFAULT_STORY_TITLE
        self._backend = backend
        self._active_idea_names = list(active_idea_names)
        self._cooldown_seconds = generation_cooldown_seconds
        self._clock = clock
        self._in_flight = False
        self._cooldown_until = 0.0
        self.last_saved: datetime | None = None
        self.content = ""
        self.word_count = 0
        self.change_content(content)

    @property
    def active_idea_names(self) -> list[str]:
        return list(self._active_idea_names)

    @property
    def is_generating(self) -> bool:
        return self._in_flight or self._clock() < self._cooldown_until

    def set_active_idea_names(self, names: Sequence[str]) -> None:
        """Replace the highlighted idea names and re-tag current content."""
        self._active_idea_names = list(names)
        self.change_content(self.content)

    def rename(self, title: str) -> None:
        self.title = title

    def change_content(self, html_content: str) -> str:
        """Apply an editor change; returns the tagged content now held."""
        tagged = tag_idea_mentions(html_content, self._active_idea_names)
        self.content = tagged
        self.word_count = count_words(strip_idea_tags(tagged))
        return tagged

    def save(self) -> None:
        """Persist title, content, and word count (editor blur)."""
        self._backend.update_story(
            story_id=self.story_id,
            title=self.title,
            content=self.content,
            word_count=self.word_count,
        )
        self.last_saved = datetime.now(UTC)
        logger.info(
            "editor.saved story_id=%s word_count=%s", self.story_id, self.word_count
        )

    def request_generation(
        self,
        prompt: str,
        *,
        use_ideas: bool = True,
        style: GenerationStyle = "detailed",
    ) -> TypewriterReveal:
        """Generate text, append it to the document, and save.

        Returns a reveal over the generated text for typewriter display.
        """
        if not prompt.strip():
            raise ValueError("Prompt must not be blank.")
        if self.is_generating:
            raise GenerationInProgressError("A generation is already in progress.")

        self._in_flight = True
        try:
            generated = self._backend.generate_content(
                story_id=self.story_id,
                prompt=prompt,
                use_ideas=use_ideas,
                style=style,
            )
        finally:
            self._in_flight = False
            self._cooldown_until = self._clock() + self._cooldown_seconds

        self.change_content(append_paragraphs(self.content, generated))
        self.save()
        return TypewriterReveal(generated)
