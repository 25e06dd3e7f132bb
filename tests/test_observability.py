from __future__ import annotations

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from story_canvas.adapters import observability


@pytest.fixture
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    access_level = logging.getLogger("uvicorn.access").level
    generation_level = logging.getLogger(observability.GENERATION_LOGGER).level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(access_level)
    logging.getLogger(observability.GENERATION_LOGGER).setLevel(generation_level)


def test_configure_runtime_logging_uses_env_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging: None
) -> None:
    log_path = tmp_path / "logs" / "canvas.log"
    monkeypatch.setattr(observability, "_CONFIGURED", False)
    monkeypatch.setenv("STORY_CANVAS_LOG_PATH", str(log_path))
    monkeypatch.setenv("STORY_CANVAS_LOG_LEVEL", "debug")
    monkeypatch.setenv("STORY_CANVAS_LOG_MAX_BYTES", "1")
    monkeypatch.setenv("STORY_CANVAS_LOG_BACKUP_COUNT", "not-a-number")
    monkeypatch.setenv("STORY_CANVAS_ACCESS_LOG_LEVEL", "error")

    observability.configure_runtime_logging()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 64 * 1024
    assert file_handlers[0].backupCount == 5
    assert Path(file_handlers[0].baseFilename) == log_path
    assert logging.getLogger("uvicorn.access").level == logging.ERROR

    logging.getLogger("story_canvas.test").info("story.created story_id=1")
    file_handlers[0].flush()
    assert "story.created story_id=1" in log_path.read_text(encoding="utf-8")


def test_configure_runtime_logging_runs_once_unless_forced(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging: None
) -> None:
    monkeypatch.setattr(observability, "_CONFIGURED", False)
    monkeypatch.setenv("STORY_CANVAS_LOG_PATH", str(tmp_path / "first.log"))
    observability.configure_runtime_logging()
    first = list(logging.getLogger().handlers)

    monkeypatch.setenv("STORY_CANVAS_LOG_PATH", str(tmp_path / "second.log"))
    observability.configure_runtime_logging()
    assert logging.getLogger().handlers == first

    observability.configure_runtime_logging(force=True)
    for handler in first:
        handler.close()
    paths = [
        Path(h.baseFilename)
        for h in logging.getLogger().handlers
        if isinstance(h, RotatingFileHandler)
    ]
    assert paths == [tmp_path / "second.log"]


def test_generation_events_can_log_below_root_level(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging: None
) -> None:
    log_path = tmp_path / "canvas.log"
    monkeypatch.setattr(observability, "_CONFIGURED", False)
    monkeypatch.setenv("STORY_CANVAS_LOG_PATH", str(log_path))
    monkeypatch.setenv("STORY_CANVAS_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("STORY_CANVAS_GENERATION_LOG_LEVEL", "info")

    settings = observability.configure_runtime_logging()

    assert settings is not None
    assert settings.generation_level == logging.INFO
    logging.getLogger(observability.GENERATION_LOGGER).info("generation.completed chars=12")
    logging.getLogger("story_canvas.api.app").info("story.created story_id=1")
    for handler in logging.getLogger().handlers:
        handler.flush()
    written = log_path.read_text(encoding="utf-8")
    assert "generation.completed chars=12" in written
    assert "story.created" not in written


def test_explicit_settings_override_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging: None
) -> None:
    monkeypatch.setattr(observability, "_CONFIGURED", False)
    monkeypatch.setenv("STORY_CANVAS_LOG_PATH", str(tmp_path / "env.log"))
    monkeypatch.setenv("STORY_CANVAS_LOG_LEVEL", "not-a-level")
    assert observability.LoggingSettings.from_env().level == logging.INFO

    settings = observability.LoggingSettings(
        level=logging.ERROR, log_path=tmp_path / "explicit.log", backup_count=2
    )
    assert observability.configure_runtime_logging(settings=settings) == settings
    assert observability.configure_runtime_logging() is None

    root = logging.getLogger()
    assert root.level == logging.ERROR
    file_handler = next(h for h in root.handlers if isinstance(h, RotatingFileHandler))
    assert Path(file_handler.baseFilename) == tmp_path / "explicit.log"
    assert file_handler.backupCount == 2
