"""Module outline shown on the home screen."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..errors import UnknownModuleError


@dataclass(frozen=True)
class ModuleConfig:
    id: int
    name: str
    description: str
    step_count: int = 6


@dataclass(frozen=True)
class ModuleGroup:
    label: str
    module_ids: Tuple[int, ...]


MODULE_GROUPS: List[ModuleGroup] = [
    ModuleGroup("LLM Fundamentals", (1, 2, 3, 4)),
    ModuleGroup("Agents & Architecture", (5, 6, 7, 8, 9)),
    ModuleGroup("RAG & Retrieval", (10, 11, 12, 13, 14)),
    ModuleGroup("Data Applications", (15, 16, 17, 18)),
    ModuleGroup("Safety & Operations", (19, 20, 21, 22, 23, 24)),
    ModuleGroup("Multimodal & Generation", (25, 26)),
]

MODULES: List[ModuleConfig] = [
    ModuleConfig(1, "Tokenization", "How text becomes tokens and vectors a model can process."),
    ModuleConfig(2, "Context Window", "Context limits, overflow strategies and token budgeting."),
    ModuleConfig(3, "Reasoning", "Chain-of-thought, tree-of-thought and reasoning models."),
    ModuleConfig(4, "Structured Output", "Schema-validated JSON through JSON mode and function calling."),
    ModuleConfig(5, "Agent vs LLM", "What a plain LLM cannot do that an agent with tools can."),
    ModuleConfig(6, "Tool Use", "Function calling against external tools, APIs and services."),
    ModuleConfig(7, "MCP Server", "The Model Context Protocol and how agents reach tools and data."),
    ModuleConfig(8, "Agentic Workflows", "Sequential, parallel, router and evaluator-optimizer patterns."),
    ModuleConfig(9, "Multi-Agent Communication", "Specialised agents collaborating on one data task."),
    ModuleConfig(10, "Cosine Similarity", "Measuring the angle between vectors to find similar text."),
    ModuleConfig(11, "Chunking Strategies", "Fixed, sentence, paragraph and recursive document splitting."),
    ModuleConfig(12, "RAG", "Grounding answers in retrieved documents."),
    ModuleConfig(13, "GraphRAG", "Entity graphs, communities and multi-hop retrieval."),
    ModuleConfig(14, "Knowledge Graphs", "Entities and relations for structured reasoning."),
    ModuleConfig(15, "Semantic Layer", "Consistent metric definitions across agent runs."),
    ModuleConfig(16, "Text-to-SQL", "Translating questions into SQL against real databases."),
    ModuleConfig(17, "Data Quality", "Detecting missing values, duplicates and outliers."),
    ModuleConfig(18, "ETL/ELT", "Schema mapping and transformation with agents."),
    ModuleConfig(19, "Grounding", "Source attribution, citations and hallucination checks."),
    ModuleConfig(20, "Guardrails", "Input validation, output filtering and safety rails."),
    ModuleConfig(21, "Evaluation", "Metrics, test suites and LLM-as-judge."),
    ModuleConfig(22, "Human-in-the-Loop", "Approval gates, confidence routing and feedback loops."),
    ModuleConfig(23, "Self-Healing Loops", "Detecting errors, diagnosing and retrying automatically."),
    ModuleConfig(24, "Cost & Latency", "Where time and money go, and how to cut both."),
    ModuleConfig(25, "Multimodal", "Text, images, audio and video in one pipeline."),
    ModuleConfig(26, "Image Generation", "Diffusion, prompt engineering and generation techniques."),
]

_BY_ID = {module.id: module for module in MODULES}


def get_module_by_id(module_id: int) -> ModuleConfig:
    try:
        return _BY_ID[module_id]
    except KeyError:
        raise UnknownModuleError(module_id) from None


def group_for_module(module_id: int) -> ModuleGroup:
    for group in MODULE_GROUPS:
        if module_id in group.module_ids:
            return group
    raise UnknownModuleError(module_id)
