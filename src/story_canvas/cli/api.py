"""CLI entrypoint for serving the story_canvas HTTP API."""

from __future__ import annotations

import argparse
import os

import uvicorn

from story_canvas.adapters.observability import configure_runtime_logging


def build_arg_parser() -> argparse.ArgumentParser:
    """Create CLI args for the local API server process."""
    parser = argparse.ArgumentParser(description="Serve story_canvas API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument(
        "--no-sample",
        action="store_true",
        help="Start with empty stores instead of the seeded sample story.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI flags and start uvicorn with the app factory path."""
    configure_runtime_logging()
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)
    if parsed.no_sample:
        os.environ["STORY_CANVAS_SEED_SAMPLE"] = "0"
    uvicorn.run(
        "story_canvas.api.app:app",
        host=str(parsed.host),
        port=int(parsed.port),
        reload=bool(parsed.reload),
    )


if __name__ == "__main__":
    main()
