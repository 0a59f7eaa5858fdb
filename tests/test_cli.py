import io
import logging
import sys
import tempfile
from contextlib import redirect_stdout
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from lessonwalk import cli


class TestCli(unittest.TestCase):
    def setUp(self):
        logger = logging.getLogger("lessonwalk")
        self._saved = (list(logger.handlers), logger.level, logger.propagate)

    def tearDown(self):
        logger = logging.getLogger("lessonwalk")
        logger.handlers, logger.level, logger.propagate = self._saved

    def run_cli(self, *argv):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            code = cli.main(list(argv))
        return code, buffer.getvalue()

    def test_list_text(self):
        code, output = self.run_cli("--list")
        self.assertEqual(code, 0)
        self.assertIn("Tool Use", output)
        self.assertIn("Image Generation", output)

    def test_list_json(self):
        code, output = self.run_cli("--list", "--output", "json")
        self.assertEqual(code, 0)
        self.assertIn('"name": "Agent vs LLM"', output)
        self.assertEqual(output.count('"group"'), 26)

    def test_unknown_module(self):
        code, output = self.run_cli("--module", "99")
        self.assertEqual(code, 1)
        self.assertIn("Unknown module: 99", output)

    def test_invalid_speed(self):
        code, output = self.run_cli("--list", "--speed", "3")
        self.assertEqual(code, 1)
        self.assertIn("Speed must be one of", output)

    def test_configure_logging_file_only(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "walk.log"
            cli.configure_logging(log_file=str(log_path), console=False)
            logger = logging.getLogger("lessonwalk")
            self.assertEqual(len(logger.handlers), 1)
            self.assertIsInstance(logger.handlers[0], logging.FileHandler)
            logging.getLogger("lessonwalk.test").debug("hello")
            logger.handlers[0].close()
            self.assertIn("hello", log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
