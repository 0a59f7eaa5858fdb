from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import asyncio
import json
import logging
import os
import sys
import termios
import tty

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound
from rich.console import Console, Group, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from .config import AppConfig
from .content import MODULE_GROUPS, MODULES, Lesson, Slide, get_lesson, get_module_by_id
from .navigation import (
    Direction,
    IndexStepper,
    InputDispatcher,
    Intent,
    NavigationState,
    SimulationMount,
    StepperLease,
)
from .playback import (
    AsyncioScheduler,
    Scheduler,
    SequencerCallbacks,
    Step,
    StepType,
    Typewriter,
)

logger = logging.getLogger(__name__)

KEY_INTENTS: Dict[str, Intent] = {
    "LEFT": Intent.PREV,
    "h": Intent.PREV,
    "RIGHT": Intent.NEXT,
    "l": Intent.NEXT,
    "b": Intent.TOGGLE_FULLSCREEN,
    "B": Intent.TOGGLE_FULLSCREEN,
    "+": Intent.INCREASE_SCALE,
    "=": Intent.INCREASE_SCALE,
    "-": Intent.DECREASE_SCALE,
    " ": Intent.TOGGLE_PLAYBACK,
    "s": Intent.CYCLE_SPEED,
    "ESC": Intent.ESCAPE,
}

STEP_STYLES: Dict[StepType, Tuple[str, str]] = {
    StepType.USER_INPUT: ("User", "bold green"),
    StepType.THINKING: ("Thinking", "dim italic"),
    StepType.REASONING: ("Reasoning", "yellow"),
    StepType.AGENT_MESSAGE: ("Agent", "cyan"),
    StepType.TOOL_CALL: ("Tool call", "magenta"),
    StepType.TOOL_RESULT: ("Tool result", "blue"),
    StepType.FINAL_RESPONSE: ("Answer", "bold white"),
}


def normalize_key(key: str) -> str:
    if key in ("\x1b[H", "\x1bOH", "\x1b[1~", "\x1b[7~"):
        return "HOME"
    if key.startswith("\x1b[") or key.startswith("\x1bO"):
        last = key[-1]
        if last == "A":
            return "UP"
        if last == "B":
            return "DOWN"
        if last == "C":
            return "RIGHT"
        if last == "D":
            return "LEFT"
        return "ESC"
    if key.startswith("\x1b"):
        return "ESC"
    return key


def split_keys(data: str) -> List[str]:
    """Split a chunk of terminal input into individual key presses."""
    keys: List[str] = []
    index = 0
    while index < len(data):
        ch = data[index]
        if ch == "\x1b" and index + 1 < len(data) and data[index + 1] in "[O":
            end = index + 2
            while end < len(data) and not (data[end].isalpha() or data[end] == "~"):
                end += 1
            keys.append(data[index : end + 1])
            index = end + 1
            continue
        keys.append(ch)
        index += 1
    return keys


@dataclass
class SlideView:
    """Everything mounted for the slide currently on screen."""

    module_id: int
    step: int
    slide: Slide
    query_index: int = 0
    simulation: Optional[SimulationMount] = None
    variants: Optional[IndexStepper] = None
    variant_lease: Optional[StepperLease] = None
    typewriter: Optional[Typewriter] = None


class PresentationTUI:
    def __init__(
        self,
        state: NavigationState,
        scheduler: Optional[Scheduler] = None,
        config: Optional[AppConfig] = None,
        console: Optional[Console] = None,
        autoplay: bool = True,
        debug: bool = False,
    ):
        self.state = state
        self.dispatcher = InputDispatcher(state)
        self.scheduler = scheduler or AsyncioScheduler()
        self.config = config or AppConfig()
        self.console = console or Console()
        self.autoplay = autoplay
        self.debug = debug
        self.lesson: Optional[Lesson] = None
        self.view: Optional[SlideView] = None
        self.status_message = ""
        self.overlay_title: Optional[str] = None
        self.overlay_lines: List[str] = []
        self.last_key = ""
        self._live: Optional[Live] = None
        self._quit: Optional[asyncio.Event] = None

    # ===== Lifecycle =====

    def run(self, module_id: Optional[int] = None, step: int = 1, fullscreen: bool = False) -> None:
        asyncio.run(self.run_async(module_id, step, fullscreen))

    async def run_async(
        self, module_id: Optional[int] = None, step: int = 1, fullscreen: bool = False
    ) -> None:
        loop = asyncio.get_running_loop()
        self._quit = asyncio.Event()
        if module_id is not None:
            self.open_module(module_id, step=step, fullscreen=fullscreen)

        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            with Live(
                self.render(),
                console=self.console,
                refresh_per_second=self.config.presentation.refresh_per_second,
                screen=True,
            ) as live:
                self._live = live
                loop.add_reader(fd, self._on_input, fd)
                try:
                    await self._quit.wait()
                finally:
                    loop.remove_reader(fd)
                    self._live = None
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
            self.close()

    def close(self) -> None:
        self._unmount()

    def _on_input(self, fd: int) -> None:
        data = os.read(fd, 64).decode("utf-8", errors="replace")
        for key in split_keys(data):
            if self.handle_key(key) == "quit":
                if self._quit is not None:
                    self._quit.set()
                return
        self.refresh()

    def refresh(self) -> None:
        if self._live is not None:
            self._live.update(self.render())

    # ===== Routing =====

    def open_module(self, module_id: int, step: int = 1, fullscreen: bool = False) -> None:
        lesson = get_lesson(module_id)
        self._unmount()
        self.lesson = lesson
        self.state.set_module(module_id, lesson.total_steps)
        self.state.set_step(step)
        if fullscreen:
            self.state.set_fullscreen(True)
        self.status_message = ""
        self.sync_slide()

    def go_home(self) -> None:
        self._unmount()
        self.lesson = None
        self.state.leave_module()
        self.status_message = ""

    def sync_slide(self) -> None:
        """Mount, remount or unmount slide resources to match the state."""
        if self.lesson is None or self.state.current_module_id is None:
            self._unmount()
            return
        key = (self.state.current_module_id, self.state.current_step)
        view = self.view
        if view is None or (view.module_id, view.step) != key:
            self._unmount()
            self._mount(self.lesson.slide(self.state.current_step))
            return
        if view.slide.has_simulation and view.query_index != self.state.query_index:
            self._release_simulation(view)
            view.query_index = self.state.query_index
            self._mount_simulation(view)

    def _mount(self, slide: Slide) -> None:
        view = SlideView(
            module_id=self.state.current_module_id,
            step=self.state.current_step,
            slide=slide,
        )
        self.view = view
        logger.debug("Mounting slide %s.%s (%s)", view.module_id, view.step, slide.title)
        if slide.queries:
            self.state.register_queries(len(slide.queries))
        view.query_index = self.state.query_index
        if slide.variants:
            view.variants = IndexStepper(len(slide.variants))
            view.variant_lease = self.state.register_stepper(view.variants)
        if slide.has_simulation:
            self._mount_simulation(view)

    def _mount_simulation(self, view: SlideView) -> None:
        callbacks = SequencerCallbacks(
            on_step_change=self._on_step_change,
            on_complete=self.refresh,
            on_reset=self._on_reset,
        )
        view.simulation = SimulationMount(
            self.state,
            view.slide.build_steps(view.query_index),
            self.scheduler,
            callbacks=callbacks,
            config=self.config.simulation,
        )
        self.dispatcher.bind_playback(view.simulation.sequencer)
        if self.autoplay:
            view.simulation.sequencer.play()

    def _release_simulation(self, view: SlideView) -> None:
        if view.typewriter is not None:
            view.typewriter.cancel()
            view.typewriter = None
        if view.simulation is not None:
            view.simulation.release()
            view.simulation = None
        self.dispatcher.bind_playback(None)

    def _unmount(self) -> None:
        view = self.view
        if view is None:
            return
        self.view = None
        self._release_simulation(view)
        if view.variant_lease is not None:
            view.variant_lease.release()
        if view.slide.queries and self.state.current_module_id is not None:
            self.state.register_queries(0)

    # ===== Simulation callbacks =====

    def _on_step_change(self, step: Step, index: int) -> None:
        view = self.view
        if view is None:
            return
        if view.typewriter is not None:
            view.typewriter.cancel()
        view.typewriter = Typewriter(
            step.content,
            self.scheduler,
            speed_ms=self.config.simulation.typing_speed_ms,
            on_update=lambda _text: self.refresh(),
        )
        view.typewriter.start()
        self.refresh()

    def _on_reset(self) -> None:
        view = self.view
        if view is not None and view.typewriter is not None:
            view.typewriter.cancel()
            view.typewriter = None
        self.refresh()

    # ===== Input Handling =====

    def handle_key(self, key: str) -> Optional[str]:
        key = normalize_key(key)
        self.last_key = key
        if key in ("q", "\x03"):
            return "quit"
        if self.overlay_title:
            if key in ("ESC", "?", "\r"):
                self._clear_overlay()
            return None

        intent = KEY_INTENTS.get(key)
        if intent is not None:
            self.dispatcher.dispatch(intent)
            self._update_status(intent)
        elif key in ("0", "HOME"):
            self.go_home()
        elif key.isdigit():
            self._jump_to_module(int(key))
        elif key == "g":
            self.state.set_step(1)
        elif key == "G":
            self.state.set_step(self.state.total_steps)
        elif key == "r":
            self.state.reset()
        elif key == "?":
            self._show_help()
        self.sync_slide()
        return None

    def _jump_to_module(self, number: int) -> None:
        if 1 <= number <= len(MODULES):
            self.open_module(MODULES[number - 1].id)

    def _update_status(self, intent: Intent) -> None:
        if self.state.fullscreen_boundary_reached:
            arrow = "->" if self.state.boundary_direction is Direction.NEXT else "<-"
            self.status_message = f"End of slide. Press {arrow} again to leave fullscreen"
        elif intent is Intent.CYCLE_SPEED and self.dispatcher.playback is not None:
            self.status_message = f"Speed {self.dispatcher.playback.speed:g}x"
        else:
            self.status_message = ""

    def _show_help(self) -> None:
        lines = [
            "Navigation:",
            "  Left/Right or h/l  - Prev/Next (simulation, example, then slide)",
            "  g/G                - First/Last slide",
            "  r                  - Back to first slide",
            "  1-9                - Jump to module",
            "  0 or Home          - Module list",
            "",
            "Presentation:",
            "  b                  - Toggle fullscreen",
            "  +/-                - Text scale",
            "",
            "Simulation:",
            "  Space              - Play/Pause",
            "  s                  - Cycle speed",
            "  Esc                - Leave fullscreen, or reset simulation",
            "",
            "General:",
            "  ?                  - Toggle help",
            "  q                  - Quit",
        ]
        self._set_overlay("Help", lines)

    def _set_overlay(self, title: str, lines: List[str]) -> None:
        self.overlay_title = title
        self.overlay_lines = lines or ["(empty)"]

    def _clear_overlay(self) -> None:
        self.overlay_title = None
        self.overlay_lines = []

    # ===== Rendering =====

    def render(self) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="main", ratio=1),
            Layout(name="footer", size=3),
        )
        layout["header"].update(self._render_header())
        if self.overlay_title:
            layout["main"].update(
                Panel(
                    Text("\n".join(self.overlay_lines)),
                    title=self.overlay_title,
                    border_style="bright_cyan",
                )
            )
        elif self.lesson is None or self.view is None:
            layout["main"].update(self._render_home())
        elif self.state.is_fullscreen:
            layout["main"].update(self._render_slide(self.view))
        else:
            layout["main"].split_row(
                Layout(name="outline", size=32),
                Layout(name="slide", ratio=1),
            )
            layout["main"]["outline"].update(self._render_outline(self.lesson))
            layout["main"]["slide"].update(self._render_slide(self.view))
        layout["footer"].update(self._render_footer())
        return layout

    def _render_header(self) -> Panel:
        title = Text()
        title.append(self.config.presentation.app_title, style="bold cyan")
        if self.lesson is not None:
            title.append("  |  ", style="dim")
            title.append(self.lesson.module.name, style="green")
            title.append("  |  ", style="dim")
            title.append(
                f"Step {self.state.current_step}/{self.state.total_steps}",
                style="bold yellow",
            )
        if self.state.is_fullscreen:
            title.append("  |  ", style="dim")
            title.append("FULLSCREEN", style="bold magenta")
        title.append("  |  ", style="dim")
        title.append(f"Aa {self.state.font_scale:g}x", style="dim")
        title.truncate(max(10, self.console.size.width - 4), overflow="ellipsis")
        return Panel(title, style="bold")

    def _render_home(self) -> Panel:
        table = Table(expand=True, show_header=True, header_style="bold")
        table.add_column("#", justify="right", width=3)
        table.add_column("Module", style="bold cyan")
        table.add_column("Group", style="dim")
        table.add_column("About")
        for group in MODULE_GROUPS:
            for module_id in group.module_ids:
                module = get_module_by_id(module_id)
                table.add_row(str(module.id), module.name, group.label, module.description)
        return Panel(table, title="Modules [1-9 to open]", border_style="cyan")

    def _render_outline(self, lesson: Lesson) -> Panel:
        text = Text()
        for number, slide in enumerate(lesson.slides, start=1):
            if number == self.state.current_step:
                text.append(f"> {number}. {slide.title}\n", style="bold reverse cyan")
            else:
                text.append(f"  {number}. {slide.title}\n", style="dim")
        return Panel(text, title="Outline", border_style="yellow")

    def _render_slide(self, view: SlideView) -> Panel:
        body_style = self._scale_style()
        parts: List[RenderableType] = []
        if view.slide.description:
            parts.append(Text(view.slide.description, style=f"italic {body_style}".strip()))
        if view.slide.queries:
            parts.append(self._render_choices("Query", view.slide.queries, self.state.query_index))
        if view.variants is not None:
            parts.append(self._render_choices("Example", view.slide.variants, view.variants.index))
        if view.simulation is not None:
            parts.append(self._render_playback_status(view))
            parts.extend(self._render_transcript(view, body_style))
        border = "bright_magenta" if self.state.is_fullscreen else "green"
        return Panel(Group(*parts), title=view.slide.title, border_style=border)

    def _render_choices(self, label: str, options, selected: int) -> Text:
        text = Text(f"{label}: ", style="bold")
        for index, option in enumerate(options):
            style = "bold reverse" if index == selected else "dim"
            text.append(f" {option} ", style=style)
            text.append(" ")
        return text

    def _render_playback_status(self, view: SlideView) -> Text:
        sequencer = view.simulation.sequencer
        if sequencer.is_complete:
            status, style = "complete", "green"
        elif sequencer.is_playing:
            status, style = "playing", "bold green"
        else:
            status, style = "paused", "yellow"
        text = Text()
        text.append(f"[{status}]", style=style)
        text.append(
            f"  step {sequencer.current_step_index + 1}/{sequencer.total_steps}"
            f"  speed {sequencer.speed:g}x",
            style="dim",
        )
        return text

    def _render_transcript(self, view: SlideView, body_style: str) -> List[RenderableType]:
        sequencer = view.simulation.sequencer
        visible = sequencer.visible_steps
        rendered: List[RenderableType] = []
        for index, step in enumerate(visible):
            label, style = STEP_STYLES[step.type]
            content = step.content
            is_latest = index == len(visible) - 1
            if is_latest and view.typewriter is not None and view.typewriter.text == step.content:
                content = view.typewriter.display_text
            line = Text()
            line.append(f"{label} ({step.actor}): ", style=style)
            line.append(content, style=body_style)
            rendered.append(line)
            if step.type is StepType.TOOL_CALL and "input" in step.metadata:
                rendered.append(_render_tool_input(step.metadata["input"]))
        return rendered

    def _scale_style(self) -> str:
        scale = self.state.font_scale
        if scale > 1.0:
            return "bold"
        if scale < 1.0:
            return "dim"
        return ""

    def _render_footer(self) -> Panel:
        shortcuts = Text()
        for key, label in (
            ("[<-]", "Prev"),
            ("[->]", "Next"),
            ("[b]", "Fullscreen"),
            ("[Space]", "Play"),
            ("[s]", "Speed"),
            ("[?]", "Help"),
            ("[q]", "Quit"),
        ):
            shortcuts.append(f" {key} ", style="bold")
            shortcuts.append(f"{label} ", style="dim")
        if self.status_message:
            shortcuts.append("  |  ", style="dim")
            shortcuts.append(self.status_message, style="yellow")
        if self.debug:
            shortcuts.append("  |  ", style="dim")
            shortcuts.append(
                f"query={self.state.query_index}/{self.state.query_count} "
                f"stepper={self.state.stepper!r} key={self.last_key}",
                style="dim",
            )
        shortcuts.truncate(max(10, self.console.size.width - 4), overflow="ellipsis")
        return Panel(shortcuts, style="dim")


def _render_tool_input(arguments) -> Syntax:
    if isinstance(arguments, dict) and set(arguments) == {"query"}:
        code, language = str(arguments["query"]), "sql"
    else:
        code, language = json.dumps(arguments, indent=2), "json"
    try:
        get_lexer_by_name(language)
    except ClassNotFound:
        language = "text"
    return Syntax(code, language, word_wrap=True, background_color="default")


def start_presentation(
    tui: PresentationTUI,
    module_id: Optional[int] = None,
    step: int = 1,
    fullscreen: bool = False,
) -> None:
    if not sys.stdin.isatty():
        print(
            "Error: Interactive presentation requires a TTY for input. Run from a terminal.",
            file=sys.stderr,
        )
        sys.exit(1)
    tui.run(module_id, step=step, fullscreen=fullscreen)
