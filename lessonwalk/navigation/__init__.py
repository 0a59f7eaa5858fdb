"""Presentation navigation and arrow-key delegation."""

from .dispatcher import InputDispatcher, Intent
from .mounts import SimulationMount
from .state import Direction, NavigationState, StepperLease
from .steppers import (
    NO_STEPPER,
    CallbackStepper,
    IndexStepper,
    NoStepper,
    SequencerStepper,
    Stepper,
)

__all__ = [
    "CallbackStepper",
    "Direction",
    "IndexStepper",
    "InputDispatcher",
    "Intent",
    "NO_STEPPER",
    "NavigationState",
    "NoStepper",
    "SequencerStepper",
    "SimulationMount",
    "Stepper",
    "StepperLease",
]
