"""Delegates that can take over directional navigation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from ..playback.sequencer import StepSequencer


class Stepper:
    """Something a widget registers to own the left/right keys.

    ``advance`` and ``retreat`` return whether they actually moved.
    """

    active = True

    def advance(self) -> bool:
        raise NotImplementedError

    def retreat(self) -> bool:
        raise NotImplementedError


class NoStepper(Stepper):
    """The empty delegate slot."""

    active = False

    def advance(self) -> bool:
        return False

    def retreat(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoStepper()"


NO_STEPPER = NoStepper()


class IndexStepper(Stepper):
    """Cycles a bounded 0-based cursor, e.g. a tab selector or example switcher."""

    def __init__(
        self,
        count: int,
        index: int = 0,
        on_change: Optional[Callable[[int], None]] = None,
    ):
        if count < 0:
            raise ValueError("count must be >= 0")
        self.count = count
        self.index = min(max(index, 0), max(count - 1, 0))
        self._on_change = on_change

    def set_index(self, index: int) -> bool:
        if index == self.index or not 0 <= index < self.count:
            return False
        self.index = index
        if self._on_change:
            self._on_change(index)
        return True

    def advance(self) -> bool:
        return self.set_index(self.index + 1)

    def retreat(self) -> bool:
        return self.set_index(self.index - 1)

    def __repr__(self) -> str:
        return f"IndexStepper({self.index}/{self.count})"


class CallbackStepper(Stepper):
    """Wraps two callables for widgets with non-linear navigation."""

    def __init__(self, advance: Callable[[], bool], retreat: Callable[[], bool]):
        self._advance = advance
        self._retreat = retreat

    def advance(self) -> bool:
        return bool(self._advance())

    def retreat(self) -> bool:
        return bool(self._retreat())


class SequencerStepper(Stepper):
    """Steps a simulation by hand with the arrow keys."""

    def __init__(self, sequencer: "StepSequencer"):
        self.sequencer = sequencer

    def advance(self) -> bool:
        if self.sequencer.is_destroyed or not self.sequencer.has_next:
            return False
        self.sequencer.next_step()
        return True

    def retreat(self) -> bool:
        if self.sequencer.is_destroyed or not self.sequencer.has_prev:
            return False
        self.sequencer.prev_step()
        return True

    def __repr__(self) -> str:
        return (
            f"SequencerStepper({self.sequencer.current_step_index}"
            f"/{self.sequencer.total_steps})"
        )
