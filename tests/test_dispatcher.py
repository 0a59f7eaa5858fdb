import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from lessonwalk.navigation.dispatcher import InputDispatcher, Intent
from lessonwalk.navigation.state import Direction, NavigationState
from lessonwalk.navigation.steppers import CallbackStepper, IndexStepper
from lessonwalk.playback.scheduling import VirtualScheduler
from lessonwalk.playback.sequencer import StepSequencer
from lessonwalk.playback.steps import Step, StepType


def make_sequencer(scheduler, count=3):
    steps = [
        Step(id=f"s{i}", type=StepType.AGENT_MESSAGE, actor="agent", content="hi", delay_ms=300)
        for i in range(count)
    ]
    return StepSequencer(steps, scheduler)


class TestInputDispatcher(unittest.TestCase):
    def setUp(self):
        self.state = NavigationState()
        self.state.set_module(5, 6)
        self.dispatcher = InputDispatcher(self.state)

    def test_home_screen_ignores_directions(self):
        state = NavigationState()
        dispatcher = InputDispatcher(state)
        self.assertFalse(dispatcher.dispatch(Intent.NEXT))
        self.assertFalse(dispatcher.dispatch(Intent.TOGGLE_FULLSCREEN))
        self.assertEqual(state.current_step, 1)

    def test_outline_moves_outside_fullscreen(self):
        self.state.register_stepper(CallbackStepper(lambda: True, lambda: True))
        self.assertTrue(self.dispatcher.dispatch(Intent.NEXT))
        self.assertEqual(self.state.current_step, 2)
        self.assertTrue(self.dispatcher.dispatch(Intent.PREV))
        self.assertFalse(self.dispatcher.dispatch(Intent.PREV))
        self.assertEqual(self.state.current_step, 1)
        self.assertFalse(self.state.fullscreen_boundary_reached)

    def test_delegate_owns_direction_until_unregistered(self):
        self.state.set_fullscreen(True)
        lease = self.state.register_stepper(CallbackStepper(lambda: True, lambda: True))

        for _ in range(10):
            self.assertTrue(self.dispatcher.dispatch(Intent.NEXT))
        self.assertEqual(self.state.current_step, 1)
        self.assertTrue(self.state.is_fullscreen)
        self.assertFalse(self.state.fullscreen_boundary_reached)

        lease.release()
        self.state.set_step(6)
        self.dispatcher.dispatch(Intent.NEXT)
        self.assertTrue(self.state.fullscreen_boundary_reached)

    def test_boundary_warns_then_exits(self):
        self.state.set_step(6)
        self.state.set_fullscreen(True)

        self.assertTrue(self.dispatcher.dispatch(Intent.NEXT))
        self.assertTrue(self.state.is_fullscreen)
        self.assertTrue(self.state.fullscreen_boundary_reached)
        self.assertIs(self.state.boundary_direction, Direction.NEXT)

        self.assertTrue(self.dispatcher.dispatch(Intent.NEXT))
        self.assertFalse(self.state.is_fullscreen)
        self.assertFalse(self.state.fullscreen_boundary_reached)
        self.assertEqual(self.state.current_step, 6)

    def test_boundary_exit_moves_outline_when_possible(self):
        self.state.set_step(3)
        self.state.set_fullscreen(True)
        self.dispatcher.dispatch(Intent.PREV)
        self.dispatcher.dispatch(Intent.PREV)
        self.assertFalse(self.state.is_fullscreen)
        self.assertEqual(self.state.current_step, 2)

    def test_jump_after_warning_needs_fresh_warning(self):
        self.state.set_step(6)
        self.state.set_fullscreen(True)
        self.dispatcher.dispatch(Intent.NEXT)
        self.assertTrue(self.state.fullscreen_boundary_reached)

        self.state.set_step(1)
        self.assertTrue(self.dispatcher.dispatch(Intent.NEXT))
        self.assertTrue(self.state.is_fullscreen)
        self.assertTrue(self.state.fullscreen_boundary_reached)
        self.assertEqual(self.state.current_step, 1)

    def test_opposite_direction_rearms_boundary(self):
        self.state.set_fullscreen(True)
        self.dispatcher.dispatch(Intent.NEXT)
        self.dispatcher.dispatch(Intent.PREV)
        self.assertTrue(self.state.is_fullscreen)
        self.assertIs(self.state.boundary_direction, Direction.PREV)

    def test_stepper_move_clears_boundary(self):
        stepper = IndexStepper(2)
        self.state.set_fullscreen(True)
        self.state.register_stepper(stepper)
        self.dispatcher.dispatch(Intent.PREV)
        self.assertIs(self.state.boundary_direction, Direction.PREV)
        self.dispatcher.dispatch(Intent.NEXT)
        self.assertEqual(stepper.index, 1)
        self.assertFalse(self.state.fullscreen_boundary_reached)

    def test_query_cursor_after_stepper_resets_playback(self):
        scheduler = VirtualScheduler()
        sequencer = make_sequencer(scheduler)
        self.dispatcher.bind_playback(sequencer)
        self.state.set_fullscreen(True)
        self.state.register_queries(2)
        sequencer.next_step()

        self.assertTrue(self.dispatcher.dispatch(Intent.NEXT))
        self.assertEqual(self.state.query_index, 1)
        self.assertEqual(sequencer.current_step_index, -1)

        self.dispatcher.dispatch(Intent.NEXT)
        self.assertTrue(self.state.fullscreen_boundary_reached)
        self.assertEqual(self.state.query_index, 1)

    def test_single_query_does_not_take_directions(self):
        self.state.set_fullscreen(True)
        self.state.register_queries(1)
        self.dispatcher.dispatch(Intent.NEXT)
        self.assertTrue(self.state.fullscreen_boundary_reached)

    def test_fullscreen_and_scale_intents(self):
        dispatcher = self.dispatcher
        self.assertTrue(dispatcher.dispatch(Intent.ENTER_FULLSCREEN))
        self.assertFalse(dispatcher.dispatch(Intent.ENTER_FULLSCREEN))
        self.assertTrue(dispatcher.dispatch(Intent.EXIT_FULLSCREEN))
        self.assertFalse(dispatcher.dispatch(Intent.EXIT_FULLSCREEN))
        self.assertTrue(dispatcher.dispatch(Intent.TOGGLE_FULLSCREEN))
        self.assertTrue(self.state.is_fullscreen)
        self.assertTrue(dispatcher.dispatch(Intent.INCREASE_SCALE))
        self.assertTrue(dispatcher.dispatch(Intent.DECREASE_SCALE))
        self.assertEqual(self.state.font_scale, 1.0)

    def test_playback_intents(self):
        scheduler = VirtualScheduler()
        sequencer = make_sequencer(scheduler)
        self.assertFalse(self.dispatcher.dispatch(Intent.TOGGLE_PLAYBACK))
        self.assertFalse(self.dispatcher.dispatch(Intent.CYCLE_SPEED))

        self.dispatcher.bind_playback(sequencer)
        self.assertTrue(self.dispatcher.dispatch(Intent.TOGGLE_PLAYBACK))
        self.assertTrue(sequencer.is_playing)
        self.assertTrue(self.dispatcher.dispatch(Intent.TOGGLE_PLAYBACK))
        self.assertFalse(sequencer.is_playing)
        self.assertTrue(self.dispatcher.dispatch(Intent.CYCLE_SPEED))
        self.assertEqual(sequencer.speed, 2)

    def test_escape_leaves_fullscreen_before_resetting(self):
        scheduler = VirtualScheduler()
        sequencer = make_sequencer(scheduler)
        self.dispatcher.bind_playback(sequencer)
        sequencer.next_step()
        self.state.set_fullscreen(True)

        self.assertTrue(self.dispatcher.dispatch(Intent.ESCAPE))
        self.assertFalse(self.state.is_fullscreen)
        self.assertEqual(sequencer.current_step_index, 0)

        self.assertTrue(self.dispatcher.dispatch(Intent.ESCAPE))
        self.assertEqual(sequencer.current_step_index, -1)


if __name__ == "__main__":
    unittest.main()
