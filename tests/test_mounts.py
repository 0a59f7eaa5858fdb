import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from lessonwalk.navigation.dispatcher import InputDispatcher, Intent
from lessonwalk.navigation.mounts import SimulationMount
from lessonwalk.navigation.state import NavigationState
from lessonwalk.navigation.steppers import NO_STEPPER, SequencerStepper
from lessonwalk.playback.scheduling import VirtualScheduler
from lessonwalk.playback.steps import Step, StepType


STEPS = [
    Step(id="ask", type=StepType.USER_INPUT, actor="user", content="Hi", delay_ms=300),
    Step(id="reply", type=StepType.FINAL_RESPONSE, actor="agent", content="Hello", delay_ms=300),
]


class TestSimulationMount(unittest.TestCase):
    def setUp(self):
        self.state = NavigationState()
        self.state.set_module(3, 6)
        self.scheduler = VirtualScheduler()

    def test_registers_sequencer_as_stepper(self):
        mount = SimulationMount(self.state, STEPS, self.scheduler)
        self.assertIsInstance(self.state.stepper, SequencerStepper)
        self.assertIs(self.state.stepper.sequencer, mount.sequencer)

        self.state.set_fullscreen(True)
        InputDispatcher(self.state).dispatch(Intent.NEXT)
        self.assertEqual(mount.sequencer.current_step_index, 0)
        self.assertFalse(self.state.fullscreen_boundary_reached)

    def test_release_clears_slot_and_stops_timers(self):
        mount = SimulationMount(self.state, STEPS, self.scheduler)
        mount.sequencer.play()
        mount.release()
        mount.release()

        self.assertTrue(mount.released)
        self.assertIs(self.state.stepper, NO_STEPPER)
        self.assertTrue(mount.sequencer.is_destroyed)
        self.scheduler.advance(10_000)
        self.assertEqual(mount.sequencer.current_step_index, -1)

    def test_late_release_keeps_newer_mount(self):
        old = SimulationMount(self.state, STEPS, self.scheduler)
        new = SimulationMount(self.state, STEPS, self.scheduler)
        old.release()
        self.assertIs(self.state.stepper.sequencer, new.sequencer)

    def test_without_delegate(self):
        with SimulationMount(self.state, STEPS, self.scheduler, delegate=False) as mount:
            self.assertIsNone(mount.lease)
            self.assertIs(self.state.stepper, NO_STEPPER)
        self.assertTrue(mount.sequencer.is_destroyed)


if __name__ == "__main__":
    unittest.main()
