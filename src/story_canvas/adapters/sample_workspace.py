"""Seed data: one sample story with a fixed set of ideas."""

from __future__ import annotations

from dataclasses import dataclass

from story_canvas.core.document_text import count_words
from story_canvas.domain.models import Idea, Story
from story_canvas.domain.ports import IdeaRepository, StoryRepository

SAMPLE_STORY_TITLE = "The Chronicles of Avaloria"
SAMPLE_STORY_CONTENT = (
    "<h2>Chapter 1: The Awakening</h2>"
    "<p>Dawn broke over the ancient forests of Avaloria, casting long shadows across the "
    "misty valleys. The scent of pine and wild herbs filled the air as Lyra made her way "
    "through the underbrush.</p>"
    "<p>She had been traveling for three days now, following the ancient map that her "
    "grandmother had left her. According to legend, the Crystal of Eldoria was hidden "
    "somewhere in these woods, waiting for one with pure intentions to claim its power.</p>"
    "<p>The forest grew denser as she ventured deeper, the canopy above blocking out much "
    "of the morning light. Strange sounds echoed between the trees – not quite animal, "
    "not quite human.</p>"
)

# (category, name, description, is_active)
SAMPLE_IDEAS: tuple[tuple[str, str, str, bool], ...] = (
    (
        "Characters",
        "Lyra",
        "A young alchemist searching for the legendary Crystal of Eldoria to heal her "
        "ailing village.",
        True,
    ),
    (
        "Characters",
        "Thorne",
        "A mysterious tracker with knowledge of the ancient forests and a dark past.",
        False,
    ),
    (
        "Locations",
        "Avaloria",
        "An ancient realm filled with magical forests, crystalline lakes, and forgotten ruins.",
        True,
    ),
    (
        "Locations",
        "The Whispering Caverns",
        "A network of underground caves where the walls are said to speak ancient secrets "
        "to those who listen.",
        False,
    ),
    (
        "Key Elements",
        "Crystal of Eldoria",
        "An ancient artifact with the power to heal or destroy, sought by many but found "
        "by few.",
        True,
    ),
    (
        "Key Elements",
        "The Ethereal Pact",
        "An ancient agreement between the mortal world and the realm of spirits that "
        "maintains balance in Avaloria.",
        False,
    ),
)


@dataclass(frozen=True)
class SampleWorkspace:
    """Records created by ``seed_sample_workspace``."""

    story: Story
    ideas: tuple[Idea, ...]


def seed_sample_workspace(*, stories: StoryRepository, ideas: IdeaRepository) -> SampleWorkspace:
    story = stories.create_story(
        title=SAMPLE_STORY_TITLE,
        content=SAMPLE_STORY_CONTENT,
        owner_id=1,
        word_count=count_words(SAMPLE_STORY_CONTENT),
    )
    created = tuple(
        ideas.create_idea(
            story_id=story.id,
            category=category,
            name=name,
            description=description,
            is_active=is_active,
        )
        for category, name, description, is_active in SAMPLE_IDEAS
    )
    return SampleWorkspace(story=story, ideas=created)
