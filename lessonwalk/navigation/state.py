"""Shared presentation position: module, outline step, variant cursor, fullscreen."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import logging

from ..config import DEFAULT_PRESENTATION, PresentationConfig
from .steppers import NO_STEPPER, Stepper

logger = logging.getLogger(__name__)


class Direction(Enum):
    NEXT = "next"
    PREV = "prev"


class StepperLease:
    """Release handle returned by :meth:`NavigationState.register_stepper`.

    Releasing clears the delegate slot only while it still holds this lease's
    stepper, so a widget tearing down late cannot evict its successor.
    """

    def __init__(self, state: "NavigationState", stepper: Stepper):
        self._state = state
        self.stepper = stepper
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def active(self) -> bool:
        return not self._released and self._state.stepper is self.stepper

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        if self._state.stepper is self.stepper:
            self._state.unregister_stepper()
        else:
            logger.debug("Stepper %r was already superseded", self.stepper)

    def __enter__(self) -> "StepperLease":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class NavigationState:
    """Where the viewer currently is.

    One instance is constructed per presentation and passed to every
    consumer. Out-of-range requests leave the state unchanged.
    """

    def __init__(self, config: PresentationConfig = DEFAULT_PRESENTATION):
        self._config = config
        self._current_module_id: Optional[int] = None
        self._current_step = 1
        self._total_steps = 0
        self._is_fullscreen = False
        self._font_scale_index = config.default_font_scale_index
        self._query_index = 0
        self._query_count = 0
        self._boundary_direction: Optional[Direction] = None
        self._stepper: Stepper = NO_STEPPER

    # ===== Read accessors =====

    @property
    def current_module_id(self) -> Optional[int]:
        return self._current_module_id

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def total_steps(self) -> int:
        return self._total_steps

    @property
    def is_fullscreen(self) -> bool:
        return self._is_fullscreen

    @property
    def font_scale(self) -> float:
        return self._config.font_scale_levels[self._font_scale_index]

    @property
    def font_scale_index(self) -> int:
        return self._font_scale_index

    @property
    def query_index(self) -> int:
        return self._query_index

    @property
    def query_count(self) -> int:
        return self._query_count

    @property
    def fullscreen_boundary_reached(self) -> bool:
        return self._boundary_direction is not None

    @property
    def boundary_direction(self) -> Optional[Direction]:
        return self._boundary_direction

    @property
    def stepper(self) -> Stepper:
        return self._stepper

    @property
    def can_go_next(self) -> bool:
        return self._current_step < self._total_steps

    @property
    def can_go_prev(self) -> bool:
        return self._current_step > 1

    # ===== Modules =====

    def set_module(self, module_id: int, total_steps: int) -> None:
        if total_steps < 0:
            raise ValueError(f"total_steps must be >= 0, got {total_steps}")
        self._drop_stale_stepper(module_id)
        logger.debug("Entering module %s (%d steps)", module_id, total_steps)
        self._current_module_id = module_id
        self._total_steps = total_steps
        self._reset_module_cursors()

    def leave_module(self) -> None:
        self._drop_stale_stepper(None)
        self._current_module_id = None
        self._total_steps = 0
        self._reset_module_cursors()

    def _reset_module_cursors(self) -> None:
        self._current_step = 1
        self._query_index = 0
        self._query_count = 0
        self._is_fullscreen = False
        self._boundary_direction = None
        self._stepper = NO_STEPPER

    def _drop_stale_stepper(self, next_module_id: Optional[int]) -> None:
        if self._stepper.active:
            logger.warning(
                "Stepper %r still registered when switching from module %s to %s; clearing",
                self._stepper,
                self._current_module_id,
                next_module_id,
            )

    # ===== Outline steps =====

    def set_step(self, step: int) -> bool:
        if not 1 <= step <= self._total_steps or step == self._current_step:
            return False
        self._current_step = step
        self._boundary_direction = None
        return True

    def next_step(self) -> bool:
        return self.set_step(self._current_step + 1)

    def prev_step(self) -> bool:
        return self.set_step(self._current_step - 1)

    def reset(self) -> None:
        self._current_step = 1
        self._boundary_direction = None

    # ===== Fullscreen =====

    def toggle_fullscreen(self) -> None:
        self.set_fullscreen(not self._is_fullscreen)

    def set_fullscreen(self, value: bool) -> None:
        self._is_fullscreen = value
        self._boundary_direction = None

    def mark_boundary(self, direction: Direction) -> None:
        self._boundary_direction = direction

    def clear_boundary(self) -> None:
        self._boundary_direction = None

    # ===== Variant cursor =====

    def register_queries(self, count: int) -> None:
        """Declare how many alternatives the current step offers; 0 clears."""
        if count < 0:
            return
        self._query_count = count
        self._query_index = 0
        self._boundary_direction = None

    def set_query_index(self, index: int) -> bool:
        if not 0 <= index < self._query_count or index == self._query_index:
            return False
        self._query_index = index
        return True

    def next_query(self) -> bool:
        return self.set_query_index(self._query_index + 1)

    def prev_query(self) -> bool:
        return self.set_query_index(self._query_index - 1)

    # ===== Delegation =====

    def register_stepper(self, stepper: Stepper) -> StepperLease:
        if self._stepper.active and self._stepper is not stepper:
            logger.debug("Replacing stepper %r with %r", self._stepper, stepper)
        else:
            logger.debug("Registered stepper %r", stepper)
        self._stepper = stepper
        return StepperLease(self, stepper)

    def unregister_stepper(self) -> None:
        self._stepper = NO_STEPPER

    # ===== Text scale =====

    def increase_font_scale(self) -> bool:
        if self._font_scale_index >= len(self._config.font_scale_levels) - 1:
            return False
        self._font_scale_index += 1
        return True

    def decrease_font_scale(self) -> bool:
        if self._font_scale_index <= 0:
            return False
        self._font_scale_index -= 1
        return True
