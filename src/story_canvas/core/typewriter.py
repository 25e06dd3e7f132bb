"""Typewriter-style character reveal as a lazy, cancellable frame sequence."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator

DEFAULT_INTERVAL_SECONDS = 0.03


class TypewriterReveal:
    """Produces growing prefixes of ``text``, one tick at a time."""

    def __init__(self, text: str, *, chars_per_tick: int = 1) -> None:
        if chars_per_tick < 1:
            raise ValueError("chars_per_tick must be at least 1.")
        self._text = text
        self._chars_per_tick = chars_per_tick
        self._index = 0
        self._cancelled = False

    @property
    def text(self) -> str:
        return self._text

    @property
    def visible_text(self) -> str:
        return self._text[: self._index]

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._cancelled or self._index >= len(self._text)

    def cancel(self) -> None:
        self._cancelled = True

    def tick(self) -> str | None:
        """Advance the reveal; ``None`` once finished or cancelled."""
        if self.done:
            return None
        self._index = min(len(self._text), self._index + self._chars_per_tick)
        return self.visible_text

    def __iter__(self) -> Iterator[str]:
        while True:
            frame = self.tick()
            if frame is None:
                return
            yield frame


async def play_reveal(
    reveal: TypewriterReveal,
    on_frame: Callable[[str], None],
    *,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
) -> str:
    """Drive ``reveal`` on the event loop and return the last frame shown."""
    shown = reveal.visible_text
    while True:
        frame = reveal.tick()
        if frame is None:
            return shown
        on_frame(frame)
        shown = frame
        await asyncio.sleep(interval_seconds)
