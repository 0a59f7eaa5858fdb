from __future__ import annotations

from dataclasses import asdict, replace
from typing import List, Optional

import argparse
import json
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import AppConfig, load_config
from .content import MODULE_GROUPS, get_lesson, get_module_by_id
from .errors import LessonwalkError
from .navigation import NavigationState


def configure_logging(
    verbose: bool = False,
    log_file: Optional[str] = None,
    console: bool = True,
) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handlers: List[logging.Handler] = []
    if console:
        handlers.append(RichHandler(level=level, show_path=False, rich_tracebacks=True))
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handlers.append(file_handler)
    if not handlers:
        handlers.append(logging.NullHandler())
    root = logging.getLogger("lessonwalk")
    root.handlers = handlers
    root.setLevel(logging.DEBUG if (verbose or log_file) else logging.WARNING)
    root.propagate = False


def list_modules(output: str = "text", console: Optional[Console] = None) -> None:
    console = console or Console()
    if output == "json":
        data = []
        for group in MODULE_GROUPS:
            for module_id in group.module_ids:
                module = get_module_by_id(module_id)
                lesson = get_lesson(module_id)
                entry = asdict(module)
                entry["group"] = group.label
                entry["slides"] = [slide.title for slide in lesson.slides]
                data.append(entry)
        console.print_json(json.dumps(data))
        return

    table = Table(title="Modules")
    table.add_column("#", justify="right")
    table.add_column("Module", style="bold cyan")
    table.add_column("Group", style="dim")
    table.add_column("Steps", justify="right")
    for group in MODULE_GROUPS:
        for module_id in group.module_ids:
            module = get_module_by_id(module_id)
            table.add_row(str(module.id), module.name, group.label, str(module.step_count))
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lessonwalk",
        description="Step through interactive AI-agent lessons in the terminal",
    )
    parser.add_argument("--module", type=int, default=None, help="Module to open")
    parser.add_argument("--step", type=int, default=1, help="Slide to start on")
    parser.add_argument(
        "--speed",
        type=float,
        default=None,
        help="Playback speed multiplier (one of the configured options)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Start the opened module in fullscreen",
    )
    parser.add_argument(
        "--no-autoplay",
        action="store_true",
        help="Do not start simulations automatically",
    )
    parser.add_argument("--list", action="store_true", help="List modules and exit")
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format for --list",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument("--log-file", default=None, help="Write logs to this file")

    args = parser.parse_args(argv)
    interactive = not args.list
    configure_logging(args.verbose, args.log_file, console=not interactive)

    try:
        config = load_config()
        if args.speed is not None:
            config = _with_speed(config, args.speed)
        if args.list:
            list_modules(args.output)
            return 0
        if args.module is not None:
            get_module_by_id(args.module)

        from .tui import PresentationTUI, start_presentation

        state = NavigationState(config.presentation)
        tui = PresentationTUI(
            state,
            config=config,
            autoplay=not args.no_autoplay,
            debug=args.verbose,
        )
        start_presentation(tui, args.module, step=args.step, fullscreen=args.fullscreen)
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 1
    except (LessonwalkError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1


def _with_speed(config: AppConfig, speed: float) -> AppConfig:
    options = config.simulation.speed_multipliers
    if speed not in options:
        raise ValueError(
            f"Speed must be one of {', '.join(f'{option:g}' for option in options)}"
        )
    simulation = replace(config.simulation, default_speed_index=options.index(speed))
    return replace(config, simulation=simulation)


if __name__ == "__main__":
    raise SystemExit(main())
