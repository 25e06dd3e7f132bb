"""Runtime logging for the story canvas server.

Console and rotating-file output share one format. The generation gateway
gets its own level so fallback events stay visible even when the rest of the
app logs only warnings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_PATH = "work/logs/story_canvas.log"
GENERATION_LOGGER = "story_canvas.adapters.text_generation_gateway"
ACCESS_LOGGER = "uvicorn.access"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_CONFIGURED = False


def _int_env(name: str, default: int, *, minimum: int, maximum: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


def _level_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip().upper()
    level = logging.getLevelName(raw) if raw else default
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class LoggingSettings:
    """Resolved logging options; see ``from_env`` for the variables read."""

    level: int = logging.INFO
    log_path: Path = Path(DEFAULT_LOG_PATH)
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5
    access_level: int = logging.WARNING
    generation_level: int = logging.INFO

    @classmethod
    def from_env(cls) -> LoggingSettings:
        raw_path = os.environ.get("STORY_CANVAS_LOG_PATH", "").strip()
        return cls(
            level=_level_env("STORY_CANVAS_LOG_LEVEL", logging.INFO),
            log_path=Path(raw_path or DEFAULT_LOG_PATH),
            max_bytes=_int_env(
                "STORY_CANVAS_LOG_MAX_BYTES",
                5 * 1024 * 1024,
                minimum=64 * 1024,
                maximum=100 * 1024 * 1024,
            ),
            backup_count=_int_env("STORY_CANVAS_LOG_BACKUP_COUNT", 5, minimum=1, maximum=60),
            access_level=_level_env("STORY_CANVAS_ACCESS_LOG_LEVEL", logging.WARNING),
            generation_level=_level_env("STORY_CANVAS_GENERATION_LOG_LEVEL", logging.INFO),
        )


def _build_handlers(settings: LoggingSettings) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(
            filename=settings.log_path,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding="utf-8",
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_runtime_logging(
    *, force: bool = False, settings: LoggingSettings | None = None
) -> LoggingSettings | None:
    """Install console and rotating-file logging once per process.

    Returns the settings applied, or ``None`` when logging was already set up
    and ``force`` is false.
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return None

    resolved = settings if settings is not None else LoggingSettings.from_env()
    root = logging.getLogger()
    root.setLevel(resolved.level)
    root.handlers.clear()
    for handler in _build_handlers(resolved):
        root.addHandler(handler)

    logging.getLogger(ACCESS_LOGGER).setLevel(resolved.access_level)
    # Propagated records skip the root level check, so this may sit below root.
    logging.getLogger(GENERATION_LOGGER).setLevel(resolved.generation_level)

    _CONFIGURED = True
    root.debug(
        "logging.configured path=%s level=%s generation_level=%s",
        resolved.log_path,
        logging.getLevelName(resolved.level),
        logging.getLevelName(resolved.generation_level),
    )
    return resolved
