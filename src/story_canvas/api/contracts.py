"""Typed contracts shared by API handlers and Python interfaces."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from story_canvas.domain.models import DEFAULT_STORY_TITLE, GenerationStyle


class ContractModel(BaseModel):
    """Base model config used by all API contracts.

    Wire keys are camelCase (``storyId``, ``isActive``); Python attributes and
    keyword arguments stay snake_case.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StoryCreateRequest(ContractModel):
    """Create a story; ``word_count`` is derived from content when omitted.

    Title and content are stored exactly as sent.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    title: str = Field(default=DEFAULT_STORY_TITLE, max_length=500)
    content: str = Field(default="", max_length=2_000_000)
    owner_id: int = Field(default=1, ge=1)
    word_count: int | None = Field(default=None, ge=0)


class StoryUpdateRequest(ContractModel):
    """Partial story update; omitted or null fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=False)

    title: str | None = Field(default=None, max_length=500)
    content: str | None = Field(default=None, max_length=2_000_000)
    owner_id: int | None = Field(default=None, ge=1)
    word_count: int | None = Field(default=None, ge=0)


class StoryResponse(ContractModel):
    id: int
    title: str
    content: str
    owner_id: int
    word_count: int
    created_at: datetime
    updated_at: datetime


class IdeaCreateRequest(ContractModel):
    """Create one idea for a story."""

    story_id: int = Field(ge=1)
    category: str = Field(min_length=1, max_length=120)
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=4000)
    is_active: bool = True


class IdeaUpdateRequest(ContractModel):
    """Partial idea update, e.g. ``{"isActive": false}`` to toggle."""

    story_id: int | None = Field(default=None, ge=1)
    category: str | None = Field(default=None, min_length=1, max_length=120)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=4000)
    is_active: bool | None = None


class IdeaResponse(ContractModel):
    id: int
    story_id: int
    category: str
    name: str
    description: str
    is_active: bool
    created_at: datetime


class GenerateRequest(ContractModel):
    """Prompt for one generation, optionally steered by the story's active ideas."""

    prompt: str = Field(min_length=1, max_length=8000)
    use_ideas: bool = False
    style: GenerationStyle = "detailed"


class GenerateResponse(ContractModel):
    generated_content: str
    id: int


class ContentGenerationResponse(ContractModel):
    id: int
    story_id: int
    prompt: str
    generated_content: str
    used_ideas: list[IdeaResponse] = Field(default_factory=list)
    created_at: datetime


class ValidationIssue(ContractModel):
    """One field-level validation failure."""

    field: str
    message: str
    type: str


class ErrorResponse(ContractModel):
    """Error payload returned for 4xx and 5xx responses."""

    message: str
    errors: list[ValidationIssue] | None = None
    error: str | None = None
