"""Playback and presentation settings."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

import logging
import os

logger = logging.getLogger(__name__)

ENV_PREFIX = "LESSONWALK_"


@dataclass(frozen=True)
class SimulationConfig:
    """Timing constants for simulation playback, in milliseconds."""

    default_step_delay_ms: int = 1500
    typing_speed_ms: int = 30
    speed_multipliers: Tuple[float, ...] = (0.5, 1, 2)
    default_speed_index: int = 1
    tool_call_result_delay_ms: int = 800
    thinking_delay_ms: int = 2000
    # Floor applied to every scheduled delay so playback never spins at zero.
    min_step_delay_ms: int = 200

    @property
    def default_speed(self) -> float:
        return self.speed_multipliers[self.default_speed_index]


@dataclass(frozen=True)
class PresentationConfig:
    app_title: str = "AI Agents Interactive Education"
    font_scale_levels: Tuple[float, ...] = (0.875, 1.0, 1.125, 1.25, 1.5)
    default_font_scale: float = 1.0
    refresh_per_second: int = 10

    @property
    def default_font_scale_index(self) -> int:
        return self.font_scale_levels.index(self.default_font_scale)


@dataclass(frozen=True)
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    presentation: PresentationConfig = field(default_factory=PresentationConfig)


DEFAULT_SIMULATION = SimulationConfig()
DEFAULT_PRESENTATION = PresentationConfig()


def load_env_file(path: Path) -> None:
    """Merge KEY=VALUE lines from ``path`` into ``os.environ`` without overriding."""
    try:
        raw = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[7:].lstrip()
        if "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if (
            len(value) >= 2
            and value[0] == value[-1]
            and value[0] in ("'", '"')
        ):
            value = value[1:-1]
        if key not in os.environ:
            os.environ[key] = value


def load_config(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> AppConfig:
    """Build the app config from defaults and ``LESSONWALK_*`` variables.

    When ``env`` is omitted the process environment is used, after merging
    ``env_file`` (``~/.env`` by default) into it.
    """
    if env is None:
        load_env_file(env_file or Path.home() / ".env")
        env = os.environ

    simulation = DEFAULT_SIMULATION
    presentation = DEFAULT_PRESENTATION

    title = env.get(f"{ENV_PREFIX}APP_TITLE")
    if title:
        presentation = replace(presentation, app_title=title)

    min_delay = _read_number(env, "MIN_STEP_DELAY_MS", int)
    if min_delay is not None:
        if min_delay < 0:
            raise ValueError(f"{ENV_PREFIX}MIN_STEP_DELAY_MS must be >= 0")
        simulation = replace(simulation, min_step_delay_ms=min_delay)

    typing_speed = _read_number(env, "TYPING_SPEED_MS", int)
    if typing_speed is not None:
        if typing_speed <= 0:
            raise ValueError(f"{ENV_PREFIX}TYPING_SPEED_MS must be > 0")
        simulation = replace(simulation, typing_speed_ms=typing_speed)

    speed = _read_number(env, "SPEED", float)
    if speed is not None:
        if speed not in simulation.speed_multipliers:
            raise ValueError(
                f"{ENV_PREFIX}SPEED must be one of "
                f"{', '.join(str(m) for m in simulation.speed_multipliers)}"
            )
        simulation = replace(
            simulation, default_speed_index=simulation.speed_multipliers.index(speed)
        )

    logger.debug("Loaded config: %s / %s", simulation, presentation)
    return AppConfig(simulation=simulation, presentation=presentation)


def _read_number(env: Mapping[str, str], name: str, kind):
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return None
    try:
        return kind(raw.strip())
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} is not a valid number: {raw!r}") from None
