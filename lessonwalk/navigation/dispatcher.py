"""Routes navigation intents to the delegate, the variant cursor or the outline."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import logging

from ..playback.sequencer import StepSequencer
from .state import Direction, NavigationState

logger = logging.getLogger(__name__)


class Intent(Enum):
    NEXT = "next"
    PREV = "prev"
    TOGGLE_FULLSCREEN = "toggle-fullscreen"
    ENTER_FULLSCREEN = "enter-fullscreen"
    EXIT_FULLSCREEN = "exit-fullscreen"
    INCREASE_SCALE = "increase-scale"
    DECREASE_SCALE = "decrease-scale"
    TOGGLE_PLAYBACK = "toggle-playback"
    CYCLE_SPEED = "cycle-speed"
    ESCAPE = "escape"


class InputDispatcher:
    """Turns intents into calls on a :class:`NavigationState`.

    In fullscreen, a directional intent goes to the registered stepper first,
    then to the variant cursor, and only then hits the boundary: the first
    press that cannot move anything arms a warning, the second press in the
    same direction leaves fullscreen and moves the outline if it can.
    """

    def __init__(self, state: NavigationState):
        self.state = state
        self.playback: Optional[StepSequencer] = None

    def bind_playback(self, sequencer: Optional[StepSequencer]) -> None:
        self.playback = sequencer

    def dispatch(self, intent: Intent) -> bool:
        """Apply ``intent``; returns whether anything changed."""
        logger.debug("Dispatching %s", intent.value)
        if intent is Intent.NEXT:
            return self._directional(Direction.NEXT)
        if intent is Intent.PREV:
            return self._directional(Direction.PREV)
        if intent is Intent.TOGGLE_FULLSCREEN:
            if self.state.current_module_id is None:
                return False
            self.state.toggle_fullscreen()
            return True
        if intent is Intent.ENTER_FULLSCREEN:
            if self.state.current_module_id is None or self.state.is_fullscreen:
                return False
            self.state.set_fullscreen(True)
            return True
        if intent is Intent.EXIT_FULLSCREEN:
            if not self.state.is_fullscreen:
                return False
            self.state.set_fullscreen(False)
            return True
        if intent is Intent.INCREASE_SCALE:
            return self.state.increase_font_scale()
        if intent is Intent.DECREASE_SCALE:
            return self.state.decrease_font_scale()
        if intent is Intent.TOGGLE_PLAYBACK:
            return self._toggle_playback()
        if intent is Intent.CYCLE_SPEED:
            if self.playback is None:
                return False
            self.playback.cycle_speed()
            return True
        if intent is Intent.ESCAPE:
            if self.state.is_fullscreen:
                self.state.set_fullscreen(False)
                return True
            if self.playback is not None:
                self.playback.reset()
                return True
            return False
        return False

    def _directional(self, direction: Direction) -> bool:
        state = self.state
        if state.current_module_id is None:
            return False
        forward = direction is Direction.NEXT

        if not state.is_fullscreen:
            return state.next_step() if forward else state.prev_step()

        stepper = state.stepper
        if stepper.advance() if forward else stepper.retreat():
            state.clear_boundary()
            return True

        if state.query_count > 1:
            moved = state.next_query() if forward else state.prev_query()
            if moved:
                if self.playback is not None:
                    self.playback.reset()
                state.clear_boundary()
                return True

        if state.boundary_direction is direction:
            logger.debug("Leaving fullscreen at the %s boundary", direction.value)
            state.set_fullscreen(False)
            if forward:
                state.next_step()
            else:
                state.prev_step()
        else:
            state.mark_boundary(direction)
        return True

    def _toggle_playback(self) -> bool:
        if self.playback is None:
            return False
        if self.playback.is_playing:
            self.playback.pause()
        else:
            self.playback.play()
        return True
