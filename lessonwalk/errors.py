"""Exceptions raised by lessonwalk."""

from __future__ import annotations


class LessonwalkError(Exception):
    """Base class for lessonwalk errors."""


class UnknownModuleError(LessonwalkError, KeyError):
    """Raised when a module id is not in the catalog."""

    def __init__(self, module_id: int):
        super().__init__(module_id)
        self.module_id = module_id

    def __str__(self) -> str:
        return f"Unknown module: {self.module_id}"
