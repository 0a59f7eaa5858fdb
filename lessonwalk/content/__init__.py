"""Built-in course content."""

from .catalog import (
    MODULE_GROUPS,
    MODULES,
    ModuleConfig,
    ModuleGroup,
    get_module_by_id,
    group_for_module,
)
from .lessons import AGENT_QUERIES, Lesson, Slide, get_lesson

__all__ = [
    "AGENT_QUERIES",
    "Lesson",
    "MODULES",
    "MODULE_GROUPS",
    "ModuleConfig",
    "ModuleGroup",
    "Slide",
    "get_lesson",
    "get_module_by_id",
    "group_for_module",
]
