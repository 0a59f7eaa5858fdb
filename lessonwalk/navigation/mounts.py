"""Scoped ownership of a simulation and its arrow-key delegate."""

from __future__ import annotations

from typing import Iterable, Optional

import logging

from ..config import DEFAULT_SIMULATION, SimulationConfig
from ..playback.scheduling import Scheduler
from ..playback.sequencer import SequencerCallbacks, StepSequencer
from ..playback.steps import Step
from .state import NavigationState, StepperLease
from .steppers import SequencerStepper

logger = logging.getLogger(__name__)


class SimulationMount:
    """Creates a sequencer for a visible slide and tears it down on release.

    With ``delegate`` set, the sequencer is also registered as the arrow-key
    stepper so fullscreen navigation walks through the simulation.
    """

    def __init__(
        self,
        state: NavigationState,
        steps: Iterable[Step],
        scheduler: Scheduler,
        callbacks: Optional[SequencerCallbacks] = None,
        config: SimulationConfig = DEFAULT_SIMULATION,
        delegate: bool = True,
    ):
        self.sequencer = StepSequencer(steps, scheduler, callbacks=callbacks, config=config)
        self.lease: Optional[StepperLease] = None
        if delegate:
            self.lease = state.register_stepper(SequencerStepper(self.sequencer))
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        if self.lease is not None:
            self.lease.release()
        self.sequencer.destroy()
        logger.debug("Released simulation of %d steps", self.sequencer.total_steps)

    def __enter__(self) -> "SimulationMount":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
