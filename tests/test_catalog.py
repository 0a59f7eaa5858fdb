import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from lessonwalk.content import (
    AGENT_QUERIES,
    MODULE_GROUPS,
    MODULES,
    get_lesson,
    get_module_by_id,
    group_for_module,
)
from lessonwalk.errors import LessonwalkError, UnknownModuleError


class TestCatalog(unittest.TestCase):
    def test_groups_cover_every_module_once(self):
        ids = [module_id for group in MODULE_GROUPS for module_id in group.module_ids]
        self.assertEqual(sorted(ids), [module.id for module in MODULES])
        self.assertEqual(len(MODULES), 26)

    def test_lookup(self):
        module = get_module_by_id(6)
        self.assertEqual(module.name, "Tool Use")
        self.assertEqual(group_for_module(6).label, "Agents & Architecture")

    def test_unknown_module(self):
        with self.assertRaises(UnknownModuleError) as ctx:
            get_module_by_id(99)
        self.assertEqual(ctx.exception.module_id, 99)
        self.assertIn("99", str(ctx.exception))
        self.assertIsInstance(ctx.exception, LessonwalkError)
        with self.assertRaises(KeyError):
            group_for_module(0)


class TestLessons(unittest.TestCase):
    def test_every_module_has_a_lesson(self):
        for module in MODULES:
            lesson = get_lesson(module.id)
            self.assertEqual(lesson.total_steps, module.step_count)
            self.assertEqual(lesson.slide(1), lesson.slides[0])

    def test_agent_demo_offers_queries(self):
        slide = get_lesson(5).slide(4)
        self.assertEqual(slide.queries, AGENT_QUERIES)
        self.assertTrue(slide.has_simulation)
        for index, query in enumerate(AGENT_QUERIES):
            steps = slide.build_steps(index)
            self.assertEqual(steps[0].content, query)
            self.assertEqual(len({step.id for step in steps}), len(steps))

    def test_tool_call_steps_carry_input(self):
        steps = get_lesson(6).slide(4).build_steps(0)
        calls = [step for step in steps if step.metadata.get("toolName")]
        self.assertEqual(
            [step.metadata["toolName"] for step in calls],
            ["get_weather", "get_weather", "calculator", "calculator"],
        )
        self.assertEqual(calls[0].metadata["input"], {"city": "Prague"})

    def test_variant_slides(self):
        slide = get_lesson(22).slide(2)
        self.assertEqual(len(slide.variants), 4)
        self.assertFalse(slide.has_simulation)

    def test_generic_lesson(self):
        lesson = get_lesson(1)
        self.assertEqual(lesson.slide(1).title, "Introduction")
        self.assertFalse(any(slide.has_simulation for slide in lesson.slides))


if __name__ == "__main__":
    unittest.main()
