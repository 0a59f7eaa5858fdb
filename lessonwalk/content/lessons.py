"""Slides and scripted simulations for each module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import json

from ..config import DEFAULT_SIMULATION
from ..playback.steps import Step, StepType
from .catalog import ModuleConfig, get_module_by_id

StepBuilder = Callable[[int], List[Step]]

DELAY = {
    "user_input": 300,
    "thinking": DEFAULT_SIMULATION.thinking_delay_ms,
    "reasoning": DEFAULT_SIMULATION.default_step_delay_ms,
    "tool_call": DEFAULT_SIMULATION.tool_call_result_delay_ms,
    "tool_result": 500,
    "final_response": 400,
}


@dataclass(frozen=True)
class Slide:
    """One outline step of a module.

    ``queries`` are alternative inputs the viewer can cycle through.
    ``build_steps`` receives the selected query index and returns the
    simulation to play. ``variants`` are sub-views cycled by an index stepper.
    """

    title: str
    description: str = ""
    queries: Tuple[str, ...] = ()
    build_steps: Optional[StepBuilder] = None
    variants: Tuple[str, ...] = ()

    @property
    def has_simulation(self) -> bool:
        return self.build_steps is not None


@dataclass(frozen=True)
class Lesson:
    module: ModuleConfig
    slides: Tuple[Slide, ...] = field(default_factory=tuple)

    @property
    def total_steps(self) -> int:
        return len(self.slides)

    def slide(self, step: int) -> Slide:
        """Return the slide for a 1-based outline step."""
        return self.slides[step - 1]


def _step(step_id: str, kind: StepType, actor: str, content: str, delay: str, **metadata) -> Step:
    return Step(
        id=step_id,
        type=kind,
        actor=actor,
        content=content,
        delay_ms=DELAY[delay],
        metadata=metadata,
    )


def _tool_call(step_id: str, tool: str, arguments: Dict) -> Step:
    return _step(step_id, StepType.TOOL_CALL, "agent", tool, "tool_call", toolName=tool, input=arguments)


def _tool_result(step_id: str, tool: str, output) -> Step:
    return _step(
        step_id,
        StepType.TOOL_RESULT,
        "tool",
        json.dumps(output),
        "tool_result",
        toolName=tool,
        output=output,
    )


# ===== Module 3: Reasoning =====

def _reasoning_steps(_query_index: int) -> List[Step]:
    return [
        _step("cot-1", StepType.USER_INPUT, "user",
              "A shop sells pens at 3 for $4. How much do 18 pens cost?", "user_input"),
        _step("cot-2", StepType.THINKING, "llm", "Breaking the problem down...", "thinking"),
        _step("cot-3", StepType.REASONING, "llm",
              "18 pens is 18 / 3 = 6 groups of three pens.", "reasoning"),
        _step("cot-4", StepType.REASONING, "llm",
              "Each group costs $4, so 6 groups cost 6 * 4 = $24.", "reasoning"),
        _step("cot-5", StepType.FINAL_RESPONSE, "assistant", "18 pens cost $24.", "final_response"),
    ]


# ===== Module 5: Agent vs LLM =====

AGENT_QUERIES = (
    "What was Q4 revenue?",
    "Show top 5 customers by revenue",
    "What's the monthly sales trend?",
)

_PLAIN_ANSWER = (
    "I don't have access to your company's database or financial records. "
    "I can only work with what is in this conversation or my training data, "
    "so you would need to query your internal systems for this."
)


def _plain_llm_steps(query_index: int) -> List[Step]:
    query = AGENT_QUERIES[query_index]
    return [
        _step(f"plain-{query_index}-1", StepType.USER_INPUT, "user", query, "user_input"),
        _step(f"plain-{query_index}-2", StepType.THINKING, "llm", "Processing the question...", "thinking"),
        _step(f"plain-{query_index}-3", StepType.FINAL_RESPONSE, "assistant", _PLAIN_ANSWER, "final_response"),
    ]


_AGENT_SCRIPTS = (
    (
        "I need Q4 2024 revenue. I'll sum completed orders from October to December.",
        "SELECT SUM(order_amount - discount) AS revenue FROM orders "
        "WHERE order_date BETWEEN '2024-10-01' AND '2024-12-31' AND status = 'completed'",
        {"revenue": 173380},
        "Q4 2024 revenue was 173,380 CZK across completed orders.",
    ),
    (
        "I'll rank customers by their total completed order value.",
        "SELECT customer_name, SUM(order_amount) AS revenue FROM orders "
        "JOIN customers USING (customer_id) GROUP BY customer_name ORDER BY revenue DESC LIMIT 5",
        [
            {"customer_name": "Novak s.r.o.", "revenue": 48210},
            {"customer_name": "Dvorak a.s.", "revenue": 41950},
            {"customer_name": "Svoboda Group", "revenue": 37400},
            {"customer_name": "Cerny Retail", "revenue": 30120},
            {"customer_name": "Prochazka Ltd", "revenue": 27885},
        ],
        "Top customer is Novak s.r.o. with 48,210 CZK; the top five account for 185,565 CZK.",
    ),
    (
        "I'll group completed orders by month to show the trend.",
        "SELECT MONTH(order_date) AS month, SUM(order_amount) AS revenue FROM orders "
        "WHERE status = 'completed' GROUP BY MONTH(order_date) ORDER BY month",
        [
            {"month": 10, "revenue": 52450},
            {"month": 11, "revenue": 58120},
            {"month": 12, "revenue": 62810},
        ],
        "Sales grew every month: 52,450 in October, 58,120 in November and 62,810 in December.",
    ),
)


def _agent_steps(query_index: int) -> List[Step]:
    reasoning, sql, output, answer = _AGENT_SCRIPTS[query_index]
    prefix = f"agent-{query_index}"
    return [
        _step(f"{prefix}-1", StepType.USER_INPUT, "user", AGENT_QUERIES[query_index], "user_input"),
        _step(f"{prefix}-2", StepType.REASONING, "agent", reasoning, "reasoning"),
        _tool_call(f"{prefix}-3", "execute_sql", {"query": sql}),
        _tool_result(f"{prefix}-4", "execute_sql", output),
        _step(f"{prefix}-5", StepType.FINAL_RESPONSE, "assistant", answer, "final_response"),
    ]


# ===== Module 6: Tool Use =====

def _single_tool_steps(_query_index: int) -> List[Step]:
    return [
        _step("single-1", StepType.USER_INPUT, "user", "What is 8372 * 491?", "user_input"),
        _step("single-2", StepType.REASONING, "agent",
              "This requires a precise calculation. I'll use the calculator tool.", "reasoning"),
        _tool_call("single-3", "calculator", {"expression": "8372 * 491"}),
        _tool_result("single-4", "calculator", {"result": 4110652}),
        _step("single-5", StepType.FINAL_RESPONSE, "assistant", "8372 * 491 = 4,110,652", "final_response"),
    ]


def _multi_tool_steps(_query_index: int) -> List[Step]:
    return [
        _step("multi-1", StepType.USER_INPUT, "user",
              "What's the weather in Prague and how much is that in Fahrenheit?", "user_input"),
        _step("multi-2", StepType.REASONING, "agent",
              "I need the weather in Prague first, then I'll convert the temperature.", "reasoning"),
        _tool_call("multi-3", "get_weather", {"city": "Prague"}),
        _tool_result("multi-4", "get_weather",
                     {"temperature": 22, "condition": "Partly cloudy", "humidity": 65}),
        _step("multi-5", StepType.REASONING, "agent",
              "Got the weather. Now I convert 22°C to Fahrenheit.", "reasoning"),
        _tool_call("multi-6", "calculator", {"expression": "22 * 9/5 + 32"}),
        _tool_result("multi-7", "calculator", {"result": 71.6}),
        _step("multi-8", StepType.FINAL_RESPONSE, "assistant",
              "Prague is partly cloudy at 22°C (71.6°F) with 65% humidity.", "final_response"),
    ]


def _tool_error_steps(_query_index: int) -> List[Step]:
    return [
        _step("error-1", StepType.USER_INPUT, "user", "What's the weather in Atlantis?", "user_input"),
        _tool_call("error-2", "get_weather", {"city": "Atlantis"}),
        _tool_result("error-3", "get_weather", {"error": "City not found: Atlantis"}),
        _step("error-4", StepType.AGENT_MESSAGE, "agent",
              "The weather service does not know that city. I'll tell the user instead of guessing.",
              "reasoning"),
        _step("error-5", StepType.FINAL_RESPONSE, "assistant",
              "I couldn't find weather data for Atlantis. Could you check the city name?",
              "final_response"),
    ]


# ===== Lessons =====

_GENERIC_TITLES = (
    "Introduction",
    "Core Concepts",
    "How It Works",
    "Interactive Demo",
    "Trade-offs",
    "Summary",
)

_AUTHORED: Dict[int, Tuple[Slide, ...]] = {
    3: (
        Slide("Introduction", "Why models benefit from thinking step by step"),
        Slide("Chain-of-Thought Prompting", "Asking the model to show its work"),
        Slide("Advanced Patterns", "Tree-of-thought and self-consistency",
              variants=("Tree-of-Thought", "Self-Consistency", "ReAct")),
        Slide("Reasoning Demo", "Watch a model reason through a word problem",
              build_steps=_reasoning_steps),
        Slide("Reasoning Models", "Models trained to reason before answering"),
        Slide("Summary", "When to reach for explicit reasoning"),
    ),
    5: (
        Slide("Introduction", "Two systems, one question"),
        Slide("Plain LLM", "A language model without tools", queries=AGENT_QUERIES,
              build_steps=_plain_llm_steps),
        Slide("What Is an Agent?", "Tools, reasoning and memory around a model"),
        Slide("Agent Demo", "The same questions answered with a database tool",
              queries=AGENT_QUERIES, build_steps=_agent_steps),
        Slide("Comparison", "Side by side"),
        Slide("Summary", "When an agent is worth the complexity"),
    ),
    6: (
        Slide("Introduction to Tool Use", "Why LLMs need external tools"),
        Slide("Tool Definitions", "How tools are defined with JSON schemas",
              variants=("calculator", "get_weather", "execute_sql")),
        Slide("Single Tool Call", "A single tool call in action", build_steps=_single_tool_steps),
        Slide("Multi-Tool Chain", "Chaining multiple tools together", build_steps=_multi_tool_steps),
        Slide("Error Handling", "Handling tool failures gracefully", build_steps=_tool_error_steps),
        Slide("Summary", "Best practices for tool design"),
    ),
    22: (
        Slide("Introduction", "Keeping humans in control of critical decisions"),
        Slide("Approval Patterns", "Where to put the human gate",
              variants=("Pre-approval", "Post-review", "Escalation", "Sampling audit")),
        Slide("Feedback Loops", "Learning from reviewer corrections"),
        Slide("Approval Demo", "An agent pausing for sign-off"),
        Slide("Confidence Routing", "Routing by model confidence",
              variants=("High confidence", "Medium confidence", "Low confidence")),
        Slide("Summary", "Designing for oversight"),
    ),
}


def get_lesson(module_id: int) -> Lesson:
    module = get_module_by_id(module_id)
    slides = _AUTHORED.get(module_id)
    if slides is None:
        slides = tuple(
            Slide(title, f"{module.name}: {title.lower()}")
            for title in _GENERIC_TITLES[: module.step_count]
        )
    return Lesson(module=module, slides=slides)
