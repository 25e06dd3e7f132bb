"""Python-first interface for story canvas API interactions."""

from __future__ import annotations

import httpx

from story_canvas.api.contracts import (
    ContentGenerationResponse,
    GenerateRequest,
    GenerateResponse,
    IdeaCreateRequest,
    IdeaResponse,
    IdeaUpdateRequest,
    StoryCreateRequest,
    StoryResponse,
    StoryUpdateRequest,
)
from story_canvas.domain.models import DEFAULT_STORY_TITLE, GenerationStyle

DEFAULT_TIMEOUT_SECONDS = 30.0
# Generation waits on the external model; the server enforces no timeout of its own.
GENERATION_TIMEOUT_SECONDS = 120.0


class StoryCanvasClient:
    """Tiny typed API client for Python users.

    Also satisfies the editor session backend (``update_story`` and
    ``generate_content``).
    """

    def __init__(self, api_base_url: str = "http://127.0.0.1:8000") -> None:
        """Initialize client with an API base URL."""
        self._api_base_url = api_base_url.rstrip("/")

    @property
    def api_base_url(self) -> str:
        """Return normalized API base URL."""
        return self._api_base_url

    def _url(self, path: str) -> str:
        return f"{self._api_base_url}/api{path}"

    def list_stories(self) -> list[StoryResponse]:
        response = httpx.get(self._url("/stories"), timeout=DEFAULT_TIMEOUT_SECONDS)
        response.raise_for_status()
        return [StoryResponse.model_validate(item) for item in response.json()]

    def get_story(self, *, story_id: int) -> StoryResponse:
        response = httpx.get(self._url(f"/stories/{story_id}"), timeout=DEFAULT_TIMEOUT_SECONDS)
        response.raise_for_status()
        return StoryResponse.model_validate(response.json())

    def create_story(
        self,
        *,
        title: str = DEFAULT_STORY_TITLE,
        content: str = "",
        word_count: int | None = None,
    ) -> StoryResponse:
        """Create a story document; the server derives word count when omitted."""
        request = StoryCreateRequest(title=title, content=content, word_count=word_count)
        response = httpx.post(
            self._url("/stories"),
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
            timeout=DEFAULT_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return StoryResponse.model_validate(response.json())

    def update_story(
        self,
        *,
        story_id: int,
        title: str | None = None,
        content: str | None = None,
        word_count: int | None = None,
    ) -> StoryResponse:
        """Partially update a story; ``None`` fields are not sent."""
        request = StoryUpdateRequest(title=title, content=content, word_count=word_count)
        response = httpx.put(
            self._url(f"/stories/{story_id}"),
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
            timeout=DEFAULT_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return StoryResponse.model_validate(response.json())

    def delete_story(self, *, story_id: int) -> None:
        response = httpx.delete(
            self._url(f"/stories/{story_id}"), timeout=DEFAULT_TIMEOUT_SECONDS
        )
        response.raise_for_status()

    def list_ideas(self, *, story_id: int) -> list[IdeaResponse]:
        response = httpx.get(
            self._url(f"/stories/{story_id}/ideas"), timeout=DEFAULT_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        return [IdeaResponse.model_validate(item) for item in response.json()]

    def create_idea(
        self,
        *,
        story_id: int,
        category: str,
        name: str,
        description: str = "",
        is_active: bool = True,
    ) -> IdeaResponse:
        request = IdeaCreateRequest(
            story_id=story_id,
            category=category,
            name=name,
            description=description,
            is_active=is_active,
        )
        response = httpx.post(
            self._url("/ideas"),
            json=request.model_dump(mode="json", by_alias=True),
            timeout=DEFAULT_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return IdeaResponse.model_validate(response.json())

    def set_idea_active(self, *, idea_id: int, is_active: bool) -> IdeaResponse:
        """Toggle whether an idea is used for generation and highlighting."""
        request = IdeaUpdateRequest(is_active=is_active)
        response = httpx.put(
            self._url(f"/ideas/{idea_id}"),
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
            timeout=DEFAULT_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return IdeaResponse.model_validate(response.json())

    def delete_idea(self, *, idea_id: int) -> None:
        response = httpx.delete(self._url(f"/ideas/{idea_id}"), timeout=DEFAULT_TIMEOUT_SECONDS)
        response.raise_for_status()

    def generate(
        self,
        *,
        story_id: int,
        prompt: str,
        use_ideas: bool = True,
        style: GenerationStyle = "detailed",
    ) -> GenerateResponse:
        """Run one generation for a story and return the recorded result."""
        request = GenerateRequest(prompt=prompt, use_ideas=use_ideas, style=style)
        response = httpx.post(
            self._url(f"/stories/{story_id}/generate"),
            json=request.model_dump(mode="json", by_alias=True),
            timeout=GENERATION_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return GenerateResponse.model_validate(response.json())

    def generate_content(
        self,
        *,
        story_id: int,
        prompt: str,
        use_ideas: bool,
        style: GenerationStyle,
    ) -> str:
        return self.generate(
            story_id=story_id, prompt=prompt, use_ideas=use_ideas, style=style
        ).generated_content

    def list_generations(self, *, story_id: int) -> list[ContentGenerationResponse]:
        response = httpx.get(
            self._url(f"/stories/{story_id}/generations"), timeout=DEFAULT_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        return [ContentGenerationResponse.model_validate(item) for item in response.json()]


__all__ = ["StoryCanvasClient"]
