"""Instruction-block composition for story text generation."""

from __future__ import annotations

from collections.abc import Sequence

from story_canvas.core.idea_catalog import group_ideas_by_category
from story_canvas.domain.models import Idea

BASE_INSTRUCTION = "You are a creative writing assistant that helps craft engaging stories."
IDEAS_PREAMBLE = " Please incorporate the following key elements into your response:"

STYLE_DIRECTIVES: dict[str, str] = {
    "detailed": "Write in a detailed, descriptive style with rich imagery.",
    "concise": "Write in a concise, clear style focusing on plot advancement.",
    "poetic": "Write in a poetic, lyrical style with metaphors and beautiful language.",
}


def build_instruction_block(active_ideas: Sequence[Idea], style: str) -> str:
    """Build the system instruction from active ideas and a style directive.

    Ideas are grouped by category in first-appearance order, one
    ``- name: description`` bullet per idea. Unknown styles add no directive.
    """
    instruction = BASE_INSTRUCTION
    if active_ideas:
        instruction += IDEAS_PREAMBLE
        for category, ideas in group_ideas_by_category(active_ideas).items():
            instruction += f"\n\n{category}:\n"
            for idea in ideas:
                instruction += f"- {idea.name}: {idea.description}\n"
    directive = STYLE_DIRECTIVES.get(style)
    if directive:
        instruction += f"\n\n{directive}"
    return instruction


def build_chat_messages(
    *, prompt: str, active_ideas: Sequence[Idea], style: str
) -> list[dict[str, str]]:
    """Return the system and user turns for one chat completion."""
    return [
        {"role": "system", "content": build_instruction_block(active_ideas, style)},
        {"role": "user", "content": prompt},
    ]
