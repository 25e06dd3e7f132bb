"""Text generation gateway backed by the OpenAI chat completions API.

The gateway never raises to its caller: a missing credential, an empty model
reply, or any provider failure yields the fixed fallback narrative instead.
``generate_with_diagnostics`` reports which of those happened.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from openai import OpenAI

from story_canvas.core.generation_prompt import build_chat_messages
from story_canvas.domain.models import GenerationStyle, Idea

DEFAULT_MODEL = "gpt-4o"
GENERATION_TEMPERATURE = 0.7
GENERATION_MAX_TOKENS = 500

FALLBACK_NARRATIVE = (
    "Suddenly, a rustling sound caught Lyra's attention. She turned, her hand instinctively "
    "reaching for the dagger at her belt. From between the trees emerged a figure unlike any "
    "she had seen before - tall and lithe with skin that seemed to shimmer like moonlight on "
    "water."
)

FallbackReason = Literal["missing_api_key", "empty_response", "provider_error"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    """Generated text plus whether it came from the fallback path."""

    content: str
    fallback_used: bool
    reason: FallbackReason | None = None
    model: str | None = None


class TextGenerationGateway:
    """Compose instructions from active ideas and call the external model."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Create a gateway.

        ``api_key=None`` reads ``OPENAI_API_KEY``; an empty key selects the
        fallback-only mode. ``client`` replaces the OpenAI SDK client.
        """
        if api_key is None:
            api_key = os.environ.get("OPENAI_API_KEY", "")
        self._api_key = api_key.strip()
        self._model = (
            model or os.environ.get("STORY_CANVAS_OPENAI_MODEL", "").strip() or DEFAULT_MODEL
        )
        self._client = client

    @property
    def live(self) -> bool:
        """Whether a credential is configured for real model calls."""
        return bool(self._api_key)

    @property
    def model(self) -> str:
        return self._model

    def generate(
        self,
        prompt: str,
        active_ideas: Sequence[Idea] = (),
        style: GenerationStyle = "detailed",
    ) -> str:
        return self.generate_with_diagnostics(prompt, active_ideas, style).content

    def generate_with_diagnostics(
        self,
        prompt: str,
        active_ideas: Sequence[Idea] = (),
        style: GenerationStyle = "detailed",
    ) -> GenerationOutcome:
        if not self.live:
            logger.warning("generation.fallback reason=missing_api_key")
            return GenerationOutcome(
                content=FALLBACK_NARRATIVE, fallback_used=True, reason="missing_api_key"
            )

        try:
            messages = build_chat_messages(prompt=prompt, active_ideas=active_ideas, style=style)
            response = self._chat_client().chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=GENERATION_TEMPERATURE,
                max_tokens=GENERATION_MAX_TOKENS,
            )
            content = response.choices[0].message.content
        except Exception:  # noqa: BLE001
            logger.exception(
                "generation.fallback reason=provider_error model=%s ideas=%s style=%s",
                self._model,
                len(active_ideas),
                style,
            )
            return GenerationOutcome(
                content=FALLBACK_NARRATIVE,
                fallback_used=True,
                reason="provider_error",
                model=self._model,
            )

        if not content:
            logger.warning("generation.fallback reason=empty_response model=%s", self._model)
            return GenerationOutcome(
                content=FALLBACK_NARRATIVE,
                fallback_used=True,
                reason="empty_response",
                model=self._model,
            )
        logger.info(
            "generation.completed model=%s ideas=%s style=%s chars=%s",
            self._model,
            len(active_ideas),
            style,
            len(content),
        )
        return GenerationOutcome(content=content, fallback_used=False, model=self._model)

    def _chat_client(self) -> Any:
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key, max_retries=0)
        return self._client
