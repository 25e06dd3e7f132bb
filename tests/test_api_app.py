from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient

from story_canvas.adapters.memory_story_store import InMemoryStoryStore
from story_canvas.adapters.sample_workspace import SAMPLE_STORY_TITLE
from story_canvas.adapters.text_generation_gateway import (
    FALLBACK_NARRATIVE,
    TextGenerationGateway,
)
from story_canvas.api.app import create_app
from story_canvas.core.idea_tagging import tag_idea_mentions


def _client(*, seed: bool = True, generator: TextGenerationGateway | None = None) -> TestClient:
    gateway = generator if generator is not None else TextGenerationGateway(api_key="")
    return TestClient(create_app(text_generator=gateway, seed_sample_data=seed))


def test_healthz_and_api_root() -> None:
    client = _client()
    health = client.get("/healthz")
    assert health.status_code == 200
    assert health.json() == {"status": "ok", "service": "story_canvas"}

    root = client.get("/api")
    assert root.status_code == 200
    payload = root.json()
    assert payload["generation"] == "fallback"
    assert payload["persistence"] == "memory"
    assert "/api/stories/{story_id}/generate" in payload["endpoints"]


def test_sample_workspace_is_seeded_on_start() -> None:
    client = _client()
    stories = client.get("/api/stories").json()
    assert [story["title"] for story in stories] == [SAMPLE_STORY_TITLE]
    story = stories[0]
    assert story["id"] == 1
    assert story["ownerId"] == 1
    assert story["wordCount"] > 0
    assert {"createdAt", "updatedAt"} <= set(story)

    ideas = client.get("/api/stories/1/ideas").json()
    assert len(ideas) == 6
    active = [idea["name"] for idea in ideas if idea["isActive"]]
    assert active == ["Lyra", "Avaloria", "Crystal of Eldoria"]


def test_seed_can_be_disabled_by_argument_and_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    assert _client(seed=False).get("/api/stories").json() == []

    monkeypatch.setenv("STORY_CANVAS_SEED_SAMPLE", "0")
    client = TestClient(create_app(text_generator=TextGenerationGateway(api_key="")))
    assert client.get("/api/stories").json() == []


def test_seed_skips_non_empty_store() -> None:
    store = InMemoryStoryStore()
    store.create_story(title="Mine", content="", owner_id=1, word_count=0)
    client = TestClient(
        create_app(
            story_store=store,
            text_generator=TextGenerationGateway(api_key=""),
            seed_sample_data=True,
        )
    )
    assert [story["title"] for story in client.get("/api/stories").json()] == ["Mine"]


def test_story_crud_round_trip() -> None:
    client = _client(seed=False)

    created = client.post(
        "/api/stories", json={"title": "Draft", "content": "<p>One two three</p>"}
    )
    assert created.status_code == 201
    story = created.json()
    assert story["title"] == "Draft"
    assert story["wordCount"] == 3
    story_id = story["id"]

    updated = client.put(f"/api/stories/{story_id}", json={"content": "<p>One two</p>"})
    assert updated.status_code == 200
    body = updated.json()
    assert body["title"] == "Draft"
    assert body["wordCount"] == 2
    assert datetime.fromisoformat(body["updatedAt"]) > datetime.fromisoformat(story["updatedAt"])

    explicit = client.put(f"/api/stories/{story_id}", json={"wordCount": 40})
    assert explicit.json()["wordCount"] == 40
    assert explicit.json()["content"] == "<p>One two</p>"

    assert client.get(f"/api/stories/{story_id}").json()["wordCount"] == 40

    deleted = client.delete(f"/api/stories/{story_id}")
    assert deleted.status_code == 204
    assert deleted.content == b""
    assert client.get(f"/api/stories/{story_id}").status_code == 404


def test_story_create_defaults_title() -> None:
    client = _client(seed=False)
    created = client.post("/api/stories", json={})
    assert created.status_code == 201
    assert created.json()["title"] == "Untitled Story"
    assert created.json()["wordCount"] == 0


def test_missing_story_returns_not_found_message() -> None:
    client = _client(seed=False)
    for response in (
        client.get("/api/stories/99"),
        client.put("/api/stories/99", json={"title": "x"}),
        client.delete("/api/stories/99"),
        client.post("/api/stories/99/generate", json={"prompt": "Continue"}),
    ):
        assert response.status_code == 404
        assert response.json() == {"message": "Story not found"}


def test_invalid_payload_returns_field_errors() -> None:
    client = _client(seed=False)
    response = client.post("/api/stories", json={"title": "x", "wordCount": -1})
    assert response.status_code == 400
    payload = response.json()
    assert payload["message"] == "Invalid request data"
    assert [issue["field"] for issue in payload["errors"]] == ["wordCount"]

    unknown = client.post("/api/stories", json={"title": "x", "genre": "fantasy"})
    assert unknown.status_code == 400
    assert unknown.json()["errors"][0]["field"] == "genre"

    bad_path = client.get("/api/stories/not-a-number")
    assert bad_path.status_code == 400
    assert bad_path.json()["errors"][0]["field"] == "story_id"


def test_idea_lifecycle() -> None:
    client = _client()
    created = client.post(
        "/api/ideas",
        json={"storyId": 1, "category": "Characters", "name": "Mira", "description": "A guide."},
    )
    assert created.status_code == 201
    idea = created.json()
    assert idea["isActive"] is True
    assert idea["storyId"] == 1

    toggled = client.put(f"/api/ideas/{idea['id']}", json={"isActive": False})
    assert toggled.status_code == 200
    assert toggled.json()["isActive"] is False
    assert toggled.json()["name"] == "Mira"

    assert len(client.get("/api/stories/1/ideas").json()) == 7
    assert client.delete(f"/api/ideas/{idea['id']}").status_code == 204
    assert len(client.get("/api/stories/1/ideas").json()) == 6

    missing = client.put("/api/ideas/999", json={"isActive": True})
    assert missing.status_code == 404
    assert missing.json() == {"message": "Idea not found"}
    assert client.delete("/api/ideas/999").status_code == 404


def test_idea_requires_name_and_category() -> None:
    client = _client()
    response = client.post("/api/ideas", json={"storyId": 1, "category": "Characters"})
    assert response.status_code == 400
    assert [issue["field"] for issue in response.json()["errors"]] == ["name"]


def test_list_endpoints_for_unknown_story_are_empty() -> None:
    client = _client()
    assert client.get("/api/stories/42/ideas").json() == []
    assert client.get("/api/stories/42/generations").json() == []


def test_generate_without_credential_records_fallback() -> None:
    client = _client()
    response = client.post(
        "/api/stories/1/generate",
        json={"prompt": "What happens next?", "useIdeas": True, "style": "poetic"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["generatedContent"] == FALLBACK_NARRATIVE
    assert payload["id"] == 1

    history = client.get("/api/stories/1/generations").json()
    assert len(history) == 1
    record = history[0]
    assert record["prompt"] == "What happens next?"
    assert record["generatedContent"] == FALLBACK_NARRATIVE
    assert [idea["name"] for idea in record["usedIdeas"]] == [
        "Lyra",
        "Avaloria",
        "Crystal of Eldoria",
    ]


def test_generate_rejects_blank_prompt_and_unknown_style() -> None:
    client = _client()
    blank = client.post("/api/stories/1/generate", json={"prompt": "   "})
    assert blank.status_code == 400
    assert blank.json()["errors"][0]["field"] == "prompt"

    style = client.post("/api/stories/1/generate", json={"prompt": "Go", "style": "gothic"})
    assert style.status_code == 400
    assert style.json()["errors"][0]["field"] == "style"
    assert client.get("/api/stories/1/generations").json() == []


def test_generate_with_live_model_uses_active_ideas_and_style() -> None:
    calls: list[dict[str, Any]] = []

    def create(**kwargs: Any) -> SimpleNamespace:
        calls.append(kwargs)
        message = SimpleNamespace(content="The crystal pulsed with light.")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    fake_client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    gateway = TextGenerationGateway(api_key="test-key", client=fake_client)
    client = _client(generator=gateway)
    assert client.get("/api").json()["generation"] == "live"

    response = client.post(
        "/api/stories/1/generate",
        json={"prompt": "Describe the crystal", "useIdeas": True, "style": "poetic"},
    )
    assert response.status_code == 200
    assert response.json()["generatedContent"] == "The crystal pulsed with light."

    system = calls[0]["messages"][0]["content"]
    assert "- Crystal of Eldoria: An ancient artifact" in system
    assert "Thorne" not in system
    assert system.endswith("Write in a poetic, lyrical style with metaphors and beautiful language.")

    without_ideas = client.post("/api/stories/1/generate", json={"prompt": "Continue"})
    assert without_ideas.status_code == 200
    assert "Crystal of Eldoria" not in calls[1]["messages"][0]["content"]
    history = client.get("/api/stories/1/generations").json()
    assert [len(record["usedIdeas"]) for record in history] == [3, 0]


def test_unexpected_errors_return_internal_error_payload() -> None:
    class BrokenStore(InMemoryStoryStore):
        def list_stories(self):  # type: ignore[override]
            raise RuntimeError("disk on fire")

    app = create_app(
        story_store=BrokenStore(),
        text_generator=TextGenerationGateway(api_key=""),
        seed_sample_data=False,
    )
    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/api/stories")
    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error", "error": "disk on fire"}


def test_cors_allows_configured_origin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORY_CANVAS_CORS_ORIGINS", "http://editor.local")
    client = _client(seed=False)
    response = client.options(
        "/api/stories",
        headers={
            "Origin": "http://editor.local",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://editor.local"


def test_story_title_and_content_are_stored_verbatim() -> None:
    client = _client(seed=False)
    created = client.post("/api/stories", json={"title": "  T  ", "content": "<p>Hi</p>\n"})
    assert created.status_code == 201
    story_id = created.json()["id"]
    loaded = client.get(f"/api/stories/{story_id}").json()
    assert loaded["title"] == "  T  "
    assert loaded["content"] == "<p>Hi</p>\n"

    poem = "<pre>  indented line\n    deeper</pre>\n"
    updated = client.put(f"/api/stories/{story_id}", json={"content": poem})
    assert updated.json()["content"] == poem
    assert client.get(f"/api/stories/{story_id}").json()["content"] == poem


def test_server_word_count_ignores_idea_highlighting() -> None:
    client = _client(seed=False)
    plain = "<p>said Lyra. Lyra's map, Lyra!</p>"
    tagged = tag_idea_mentions(plain, ["Lyra"])
    first = client.post("/api/stories", json={"content": plain}).json()
    second = client.post("/api/stories", json={"content": tagged}).json()
    assert first["wordCount"] == second["wordCount"] == 5


def test_generate_with_single_active_idea_records_it() -> None:
    client = _client()
    ideas = {idea["name"]: idea["id"] for idea in client.get("/api/stories/1/ideas").json()}
    for name in ("Lyra", "Avaloria"):
        response = client.put(f"/api/ideas/{ideas[name]}", json={"isActive": False})
        assert response.json()["isActive"] is False

    generated = client.post(
        "/api/stories/1/generate",
        json={"prompt": "What happens next?", "useIdeas": True, "style": "poetic"},
    )
    assert generated.status_code == 200
    assert generated.json()["generatedContent"] == FALLBACK_NARRATIVE

    history = client.get("/api/stories/1/generations").json()
    assert len(history) == 1
    assert history[0]["id"] == generated.json()["id"]
    assert [idea["name"] for idea in history[0]["usedIdeas"]] == ["Crystal of Eldoria"]
    assert history[0]["usedIdeas"][0]["category"] == "Key Elements"
