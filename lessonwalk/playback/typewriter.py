"""Character-by-character text reveal."""

from __future__ import annotations

from typing import Callable, Optional

from ..config import DEFAULT_SIMULATION
from .scheduling import ScheduledCall, Scheduler


class Typewriter:
    """Reveals ``text`` one character per tick using ``scheduler``."""

    def __init__(
        self,
        text: str,
        scheduler: Scheduler,
        speed_ms: Optional[int] = None,
        on_update: Optional[Callable[[str], None]] = None,
    ):
        self.text = text
        self.speed_ms = speed_ms if speed_ms is not None else DEFAULT_SIMULATION.typing_speed_ms
        self._scheduler = scheduler
        self._on_update = on_update
        self._char_index = 0
        self._tick: Optional[ScheduledCall] = None

    @property
    def display_text(self) -> str:
        return self.text[: self._char_index]

    @property
    def is_complete(self) -> bool:
        return self._char_index >= len(self.text)

    @property
    def is_running(self) -> bool:
        return self._tick is not None and self._tick.pending

    def start(self) -> None:
        self.cancel()
        self._char_index = 0
        self._schedule()

    def cancel(self) -> None:
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None

    def skip(self) -> None:
        self.cancel()
        self._char_index = len(self.text)
        self._notify()

    def _schedule(self) -> None:
        if self.is_complete:
            return
        self._tick = self._scheduler.call_later(self.speed_ms, self._advance)

    def _advance(self) -> None:
        self._tick = None
        self._char_index += 1
        self._notify()
        self._schedule()

    def _notify(self) -> None:
        if self._on_update:
            self._on_update(self.display_text)
