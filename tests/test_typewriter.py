import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from lessonwalk.playback.scheduling import VirtualScheduler
from lessonwalk.playback.typewriter import Typewriter


class TestTypewriter(unittest.TestCase):
    def setUp(self):
        self.scheduler = VirtualScheduler()
        self.updates = []
        self.writer = Typewriter("abc", self.scheduler, speed_ms=10, on_update=self.updates.append)

    def test_reveals_one_character_per_tick(self):
        self.writer.start()
        self.assertEqual(self.writer.display_text, "")
        self.scheduler.advance(10)
        self.assertEqual(self.writer.display_text, "a")
        self.scheduler.advance(20)
        self.assertTrue(self.writer.is_complete)
        self.assertFalse(self.writer.is_running)
        self.assertEqual(self.updates, ["a", "ab", "abc"])

    def test_skip_shows_everything(self):
        self.writer.start()
        self.writer.skip()
        self.assertEqual(self.writer.display_text, "abc")
        self.assertEqual(self.scheduler.pending_count, 0)

    def test_cancel_freezes_text(self):
        self.writer.start()
        self.scheduler.advance(10)
        self.writer.cancel()
        self.scheduler.advance(100)
        self.assertEqual(self.writer.display_text, "a")

    def test_restart_begins_again(self):
        self.writer.start()
        self.scheduler.advance(20)
        self.writer.start()
        self.assertEqual(self.writer.display_text, "")
        self.assertEqual(self.scheduler.pending_count, 1)

    def test_empty_text_is_complete(self):
        writer = Typewriter("", self.scheduler, speed_ms=10)
        writer.start()
        self.assertTrue(writer.is_complete)
        self.assertEqual(self.scheduler.pending_count, 0)


if __name__ == "__main__":
    unittest.main()
