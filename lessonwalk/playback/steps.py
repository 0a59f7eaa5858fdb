"""Step records for scripted simulations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Tuple


class StepType(Enum):
    USER_INPUT = "user-input"
    THINKING = "thinking"
    REASONING = "reasoning"
    AGENT_MESSAGE = "agent-message"
    TOOL_CALL = "tool-call"
    TOOL_RESULT = "tool-result"
    FINAL_RESPONSE = "final-response"


@dataclass(frozen=True)
class Step:
    """One timed unit of scripted content.

    ``delay_ms`` is the wait before this step becomes visible during
    auto-play. ``metadata`` is passed through untouched.
    """

    id: str
    type: StepType
    actor: str
    content: str
    delay_ms: int
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError(f"Step {self.id!r} has a negative delay: {self.delay_ms}")
        if not isinstance(self.type, StepType):
            object.__setattr__(self, "type", StepType(self.type))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


StepSequence = Tuple[Step, ...]


def make_sequence(steps: Iterable[Step]) -> StepSequence:
    """Freeze ``steps`` into a sequence, rejecting duplicate ids."""
    frozen = tuple(steps)
    seen: set = set()
    duplicates: List[str] = []
    for step in frozen:
        if step.id in seen:
            duplicates.append(step.id)
        seen.add(step.id)
    if duplicates:
        raise ValueError(f"Duplicate step ids: {', '.join(duplicates)}")
    return frozen
