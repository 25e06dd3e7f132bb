"""Public API surface for HTTP serving and Python-first interfaces."""

from story_canvas.api.app import create_app
from story_canvas.api.contracts import (
    ContentGenerationResponse,
    GenerateRequest,
    GenerateResponse,
    IdeaResponse,
    StoryResponse,
)
from story_canvas.api.python_interface import StoryCanvasClient

__all__ = [
    "ContentGenerationResponse",
    "GenerateRequest",
    "GenerateResponse",
    "IdeaResponse",
    "StoryCanvasClient",
    "StoryResponse",
    "create_app",
]
