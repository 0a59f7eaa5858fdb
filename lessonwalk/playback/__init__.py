"""Scripted simulation playback."""

from .scheduling import (
    AsyncioScheduler,
    CancellationToken,
    ScheduledCall,
    Scheduler,
    VirtualScheduler,
)
from .sequencer import SequencerCallbacks, StepSequencer
from .steps import Step, StepSequence, StepType, make_sequence
from .typewriter import Typewriter

__all__ = [
    "AsyncioScheduler",
    "CancellationToken",
    "ScheduledCall",
    "Scheduler",
    "SequencerCallbacks",
    "Step",
    "StepSequence",
    "StepSequencer",
    "StepType",
    "Typewriter",
    "VirtualScheduler",
    "make_sequence",
]
