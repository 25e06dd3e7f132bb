"""FastAPI application for story canvas editing and generation workflows."""

from __future__ import annotations

import logging
import os
from typing import Literal

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from story_canvas.adapters.memory_generation_store import InMemoryGenerationStore
from story_canvas.adapters.memory_idea_store import InMemoryIdeaStore
from story_canvas.adapters.memory_story_store import InMemoryStoryStore
from story_canvas.adapters.sample_workspace import seed_sample_workspace
from story_canvas.adapters.text_generation_gateway import TextGenerationGateway
from story_canvas.api.contracts import (
    ContentGenerationResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    IdeaCreateRequest,
    IdeaResponse,
    IdeaUpdateRequest,
    StoryCreateRequest,
    StoryResponse,
    StoryUpdateRequest,
    ValidationIssue,
)
from story_canvas.core.document_text import count_words
from story_canvas.core.idea_catalog import active_ideas
from story_canvas.core.idea_tagging import strip_idea_tags
from story_canvas.domain.models import ContentGeneration, Idea, Story
from story_canvas.domain.ports import GenerationRepository, IdeaRepository, StoryRepository

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Simple health payload used by probes."""

    status: Literal["ok"] = "ok"
    service: str = "story_canvas"


class ApiRootResponse(BaseModel):
    """Describes currently available API capabilities and runtime mode."""

    name: str = "story_canvas"
    persistence: Literal["memory"] = "memory"
    generation: Literal["live", "fallback"] = "fallback"
    endpoints: list[str] = Field(
        default_factory=lambda: [
            "/healthz",
            "/api",
            "/api/stories",
            "/api/stories/{story_id}",
            "/api/stories/{story_id}/ideas",
            "/api/ideas",
            "/api/ideas/{idea_id}",
            "/api/stories/{story_id}/generate",
            "/api/stories/{story_id}/generations",
        ]
    )


def _cors_origins() -> list[str]:
    raw = os.environ.get("STORY_CANVAS_CORS_ORIGINS", "").strip()
    if raw:
        return [origin.strip() for origin in raw.split(",") if origin.strip()]
    return [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]


def _env_flag(name: str, *, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _story_response(story: Story) -> StoryResponse:
    return StoryResponse(
        id=story.id,
        title=story.title,
        content=story.content,
        owner_id=story.owner_id,
        word_count=story.word_count,
        created_at=story.created_at,
        updated_at=story.updated_at,
    )


def _idea_response(idea: Idea) -> IdeaResponse:
    return IdeaResponse(
        id=idea.id,
        story_id=idea.story_id,
        category=idea.category,
        name=idea.name,
        description=idea.description,
        is_active=idea.is_active,
        created_at=idea.created_at,
    )


def _generation_response(generation: ContentGeneration) -> ContentGenerationResponse:
    return ContentGenerationResponse(
        id=generation.id,
        story_id=generation.story_id,
        prompt=generation.prompt,
        generated_content=generation.generated_content,
        used_ideas=[_idea_response(idea) for idea in generation.used_ideas],
        created_at=generation.created_at,
    )


def _validation_issues(exc: RequestValidationError) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in {"body", "path", "query"}:
            location = location[1:]
        issues.append(
            ValidationIssue(
                field=".".join(location) or "body",
                message=str(error.get("msg", "Invalid value")),
                type=str(error.get("type", "value_error")),
            )
        )
    return issues


def _error_json(status_code: int, payload: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def create_app(
    *,
    story_store: StoryRepository | None = None,
    idea_store: IdeaRepository | None = None,
    generation_store: GenerationRepository | None = None,
    text_generator: TextGenerationGateway | None = None,
    seed_sample_data: bool | None = None,
) -> FastAPI:
    """Create the API application.

    Stores default to fresh in-memory adapters. When ``seed_sample_data`` is
    not given, ``STORY_CANVAS_SEED_SAMPLE`` decides (on by default), and the
    sample story is only seeded into an empty story store.
    """
    stories: StoryRepository = story_store if story_store is not None else InMemoryStoryStore()
    ideas: IdeaRepository = idea_store if idea_store is not None else InMemoryIdeaStore()
    generations: GenerationRepository = (
        generation_store if generation_store is not None else InMemoryGenerationStore()
    )
    generator = text_generator if text_generator is not None else TextGenerationGateway()
    should_seed = (
        _env_flag("STORY_CANVAS_SEED_SAMPLE", default=True)
        if seed_sample_data is None
        else seed_sample_data
    )
    if should_seed and not stories.list_stories():
        sample = seed_sample_workspace(stories=stories, ideas=ideas)
        logger.info("workspace.seeded story_id=%s ideas=%s", sample.story.id, len(sample.ideas))

    app = FastAPI(
        title="story_canvas API",
        version="0.1.0",
        description=(
            "Story document editing, categorized story ideas, and idea-aware "
            "text generation for a single-user writing canvas."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=[
            {"name": "system", "description": "Service health and runtime metadata."},
            {"name": "api", "description": "API discovery and root-level capability listing."},
            {"name": "stories", "description": "Story document CRUD."},
            {"name": "ideas", "description": "Categorized story ideas per story."},
            {"name": "generation", "description": "Idea-aware text generation and history."},
        ],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(
        "api.start generation=%s model=%s",
        "live" if generator.live else "fallback",
        generator.model,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        issues = _validation_issues(exc)
        logger.info(
            "request.invalid method=%s path=%s issues=%s",
            request.method,
            request.url.path,
            len(issues),
        )
        return _error_json(400, ErrorResponse(message="Invalid request data", errors=issues))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_json(exc.status_code, ErrorResponse(message=str(exc.detail)))

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "request.failed method=%s path=%s", request.method, request.url.path, exc_info=exc
        )
        return _error_json(
            500, ErrorResponse(message="Internal server error", error=str(exc))
        )

    def story_or_404(story_id: int) -> Story:
        story = stories.get_story(story_id=story_id)
        if story is None:
            raise HTTPException(status_code=404, detail="Story not found")
        return story

    @app.get("/healthz", response_model=HealthResponse, tags=["system"])
    def healthz() -> HealthResponse:
        return HealthResponse()

    @app.get("/api", response_model=ApiRootResponse, tags=["api"])
    def api_root() -> ApiRootResponse:
        return ApiRootResponse(generation="live" if generator.live else "fallback")

    @app.get("/api/stories", response_model=list[StoryResponse], tags=["stories"])
    def list_stories() -> list[StoryResponse]:
        return [_story_response(story) for story in stories.list_stories()]

    @app.get("/api/stories/{story_id}", response_model=StoryResponse, tags=["stories"])
    def get_story(story_id: int) -> StoryResponse:
        return _story_response(story_or_404(story_id))

    @app.post("/api/stories", response_model=StoryResponse, tags=["stories"], status_code=201)
    def create_story(payload: StoryCreateRequest) -> StoryResponse:
        word_count = payload.word_count
        if word_count is None:
            word_count = count_words(strip_idea_tags(payload.content))
        story = stories.create_story(
            title=payload.title,
            content=payload.content,
            owner_id=payload.owner_id,
            word_count=word_count,
        )
        logger.info("story.created story_id=%s word_count=%s", story.id, story.word_count)
        return _story_response(story)

    @app.put("/api/stories/{story_id}", response_model=StoryResponse, tags=["stories"])
    def update_story(story_id: int, payload: StoryUpdateRequest) -> StoryResponse:
        word_count = payload.word_count
        if word_count is None and payload.content is not None:
            word_count = count_words(strip_idea_tags(payload.content))
        story = stories.update_story(
            story_id=story_id,
            title=payload.title,
            content=payload.content,
            owner_id=payload.owner_id,
            word_count=word_count,
        )
        if story is None:
            raise HTTPException(status_code=404, detail="Story not found")
        return _story_response(story)

    @app.delete("/api/stories/{story_id}", status_code=204, tags=["stories"])
    def delete_story(story_id: int) -> Response:
        if not stories.delete_story(story_id=story_id):
            raise HTTPException(status_code=404, detail="Story not found")
        logger.info("story.deleted story_id=%s", story_id)
        return Response(status_code=204)

    @app.get(
        "/api/stories/{story_id}/ideas",
        response_model=list[IdeaResponse],
        tags=["stories", "ideas"],
    )
    def list_ideas(story_id: int) -> list[IdeaResponse]:
        return [_idea_response(idea) for idea in ideas.list_ideas_by_story(story_id=story_id)]

    @app.post("/api/ideas", response_model=IdeaResponse, tags=["ideas"], status_code=201)
    def create_idea(payload: IdeaCreateRequest) -> IdeaResponse:
        idea = ideas.create_idea(
            story_id=payload.story_id,
            category=payload.category,
            name=payload.name,
            description=payload.description,
            is_active=payload.is_active,
        )
        return _idea_response(idea)

    @app.put("/api/ideas/{idea_id}", response_model=IdeaResponse, tags=["ideas"])
    def update_idea(idea_id: int, payload: IdeaUpdateRequest) -> IdeaResponse:
        idea = ideas.update_idea(
            idea_id=idea_id,
            story_id=payload.story_id,
            category=payload.category,
            name=payload.name,
            description=payload.description,
            is_active=payload.is_active,
        )
        if idea is None:
            raise HTTPException(status_code=404, detail="Idea not found")
        return _idea_response(idea)

    @app.delete("/api/ideas/{idea_id}", status_code=204, tags=["ideas"])
    def delete_idea(idea_id: int) -> Response:
        if not ideas.delete_idea(idea_id=idea_id):
            raise HTTPException(status_code=404, detail="Idea not found")
        return Response(status_code=204)

    @app.post(
        "/api/stories/{story_id}/generate",
        response_model=GenerateResponse,
        tags=["stories", "generation"],
    )
    def generate(story_id: int, payload: GenerateRequest) -> GenerateResponse:
        story_or_404(story_id)
        used_ideas: list[Idea] = []
        if payload.use_ideas:
            used_ideas = active_ideas(ideas.list_ideas_by_story(story_id=story_id))
        outcome = generator.generate_with_diagnostics(payload.prompt, used_ideas, payload.style)
        generation = generations.create_generation(
            story_id=story_id,
            prompt=payload.prompt,
            generated_content=outcome.content,
            used_ideas=tuple(used_ideas),
        )
        logger.info(
            "generation.recorded story_id=%s generation_id=%s ideas=%s style=%s fallback=%s",
            story_id,
            generation.id,
            len(used_ideas),
            payload.style,
            outcome.fallback_used,
        )
        return GenerateResponse(generated_content=outcome.content, id=generation.id)

    @app.get(
        "/api/stories/{story_id}/generations",
        response_model=list[ContentGenerationResponse],
        tags=["stories", "generation"],
    )
    def list_generations(story_id: int) -> list[ContentGenerationResponse]:
        return [
            _generation_response(generation)
            for generation in generations.list_generations_by_story(story_id=story_id)
        ]

    return app


app = create_app()
