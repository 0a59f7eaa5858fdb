"""Step sequencer: plays a fixed sequence automatically or manually."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import logging

from ..config import DEFAULT_SIMULATION, SimulationConfig
from .scheduling import ScheduledCall, Scheduler
from .steps import Step, StepSequence, make_sequence

logger = logging.getLogger(__name__)


@dataclass
class SequencerCallbacks:
    on_step_change: Optional[Callable[[Step, int], None]] = None
    on_complete: Optional[Callable[[], None]] = None
    on_reset: Optional[Callable[[], None]] = None


class StepSequencer:
    """Advances through a sequence of steps at a configurable speed.

    Index -1 means nothing has been shown yet. At most one timer is pending
    at any time; ``pause``, ``reset`` and ``destroy`` cancel it before they
    touch any other state.
    """

    def __init__(
        self,
        steps: Iterable[Step],
        scheduler: Scheduler,
        callbacks: Optional[SequencerCallbacks] = None,
        config: SimulationConfig = DEFAULT_SIMULATION,
    ):
        self._steps: StepSequence = make_sequence(steps)
        self._scheduler = scheduler
        self._callbacks = callbacks or SequencerCallbacks()
        self._config = config
        self._timer: Optional[ScheduledCall] = None
        self._current_step_index = -1
        self._is_playing = False
        self._speed = config.default_speed
        self._destroyed = False

    # ===== Read accessors =====

    @property
    def steps(self) -> StepSequence:
        return self._steps

    @property
    def current_step_index(self) -> int:
        return self._current_step_index

    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self._current_step_index < len(self._steps):
            return self._steps[self._current_step_index]
        return None

    @property
    def visible_steps(self) -> List[Step]:
        if self._current_step_index < 0:
            return []
        return list(self._steps[: self._current_step_index + 1])

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def is_complete(self) -> bool:
        if not self._steps:
            return False
        return self._current_step_index >= len(self._steps) - 1

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def has_next(self) -> bool:
        return self._current_step_index + 1 < len(self._steps)

    @property
    def has_prev(self) -> bool:
        return self._current_step_index > 0

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None and self._timer.pending

    # ===== Playback =====

    def play(self) -> None:
        if self._ignored("play") or self.is_complete or self._is_playing:
            return
        self._is_playing = True
        self._schedule_next()

    def pause(self) -> None:
        self._clear_timer()
        self._is_playing = False

    def reset(self) -> None:
        if self._ignored("reset"):
            return
        self.pause()
        self._current_step_index = -1
        if self._callbacks.on_reset:
            self._callbacks.on_reset()

    def next_step(self) -> None:
        if self._ignored("next_step") or not self.has_next:
            return
        self._current_step_index += 1
        index = self._current_step_index
        if self._callbacks.on_step_change:
            self._callbacks.on_step_change(self._steps[index], index)

        if self.is_complete:
            self._clear_timer()
            self._is_playing = False
            logger.debug("Sequence complete after %d steps", len(self._steps))
            if self._callbacks.on_complete:
                self._callbacks.on_complete()

    def prev_step(self) -> None:
        if self._ignored("prev_step") or not self.has_prev:
            return
        self._current_step_index -= 1
        index = self._current_step_index
        if self._callbacks.on_step_change:
            self._callbacks.on_step_change(self._steps[index], index)

    def set_speed(self, multiplier: float) -> None:
        """Replace the multiplier used for delays scheduled from now on."""
        if multiplier <= 0:
            raise ValueError(f"Speed multiplier must be positive, got {multiplier}")
        self._speed = multiplier

    def cycle_speed(self) -> float:
        options = self._config.speed_multipliers
        if self._speed in options:
            position = (options.index(self._speed) + 1) % len(options)
        else:
            position = self._config.default_speed_index
        self.set_speed(options[position])
        return self._speed

    def effective_delay(self, step: Step) -> float:
        return max(step.delay_ms / self._speed, self._config.min_step_delay_ms)

    def destroy(self) -> None:
        self.pause()
        self._destroyed = True

    # ===== Scheduling =====

    def _schedule_next(self) -> None:
        self._clear_timer()
        if not self._is_playing or self.is_complete or not self.has_next:
            return
        delay = self.effective_delay(self._steps[self._current_step_index + 1])
        logger.debug(
            "Scheduling step %d in %.0fms", self._current_step_index + 1, delay
        )
        self._timer = self._scheduler.call_later(delay, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if not self._is_playing or self._destroyed:
            return
        self.next_step()
        if self._is_playing and not self.is_complete:
            self._schedule_next()

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            logger.debug("Cancelled pending step timer")
            self._timer = None

    def _ignored(self, operation: str) -> bool:
        if self._destroyed:
            logger.debug("Ignoring %s on a destroyed sequencer", operation)
            return True
        return False
