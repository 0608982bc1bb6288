"""Executable Textual app hosting the editor loop in a terminal."""

from __future__ import annotations

import argparse
import os
import shutil
import sys
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widget import Widget
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use yoers.adapters.textual.app"
    ) from exc

from rich.text import Text

from yoers.buffer import BufferLoadError
from yoers.commands import CommandRegistry, load_default_commands
from yoers.render import CELL_METRICS
from yoers.runtime import telemetry
from yoers.window import DEFAULT_IDLE_INTERVAL, EditorWindow, MainLoop, Resize

from .backend import TextualBackend


class EditorSurface(Widget):
    """Shows the last presented frame and reports its own size changes."""

    DEFAULT_CSS = """
    EditorSurface {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, *, id: Optional[str] = None) -> None:
        super().__init__(id=id)
        self.terminal_backend: TextualBackend | None = None
        self._frame = Text()

    def show(self, text: Text) -> None:
        self._frame = text
        self.refresh()

    def render(self) -> Text:
        return self._frame

    def on_resize(self, event: events.Resize) -> None:
        if self.terminal_backend is not None:
            self.terminal_backend.push(Resize(event.size.width, event.size.height))


class YoersApp(App[None]):
    """Drives ``MainLoop.run_frame`` from an interval timer instead of sleeping."""

    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(
        self,
        window: EditorWindow,
        *,
        registry: CommandRegistry | None = None,
        idle_interval: float = DEFAULT_IDLE_INTERVAL,
    ) -> None:
        super().__init__()
        self.editor_window = window
        self.command_registry = registry or _default_registry()
        self.idle_interval = idle_interval
        self.surface = EditorSurface(id="editor-surface")
        self.terminal_backend = TextualBackend(
            self.surface, window.width, window.height
        )
        self.surface.terminal_backend = self.terminal_backend
        self.main_loop = MainLoop(
            window,
            self.terminal_backend,
            self.command_registry,
            idle_interval=idle_interval,
        )

    def compose(self) -> ComposeResult:
        yield self.surface

    def on_mount(self) -> None:
        self.set_interval(self.idle_interval, self._tick)

    def on_key(self, event: events.Key) -> None:
        self.terminal_backend.push_key(
            event.key, event.character, is_printable=event.is_printable
        )
        event.stop()

    def _tick(self) -> None:
        self.main_loop.run_frame()
        if self.main_loop.finished:
            telemetry.record_event("loop.quit", data={"frames": self.main_loop.frames})
            self.exit()


def _default_registry() -> CommandRegistry:
    registry = CommandRegistry(logger_name="yoers.commands")
    load_default_commands(registry)
    return registry


def _env_int(key: str, fallback: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    columns, rows = shutil.get_terminal_size((80, 24))
    parser = argparse.ArgumentParser(prog="yoers", description="Edit a text file.")
    parser.add_argument(
        "file", nargs="?", help="File to open; a missing file starts an empty buffer"
    )
    parser.add_argument(
        "--width",
        type=int,
        default=_env_int("YOERS_WIDTH", columns),
        help="Initial viewport width in cells (default: terminal width)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=_env_int("YOERS_HEIGHT", rows),
        help="Initial viewport height in cells (default: terminal height)",
    )
    parser.add_argument(
        "--idle-ms",
        type=int,
        default=_env_int("YOERS_IDLE_MS", int(DEFAULT_IDLE_INTERVAL * 1000)),
        help="Polling interval when no input arrives (default: 10)",
    )
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("YOERS_LOG_PRESET", "production"),
        choices=("development", "production", "performance"),
        help="Telemetry preset; only 'development' logs to the console",
    )
    args = parser.parse_args(argv)
    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")
    if args.idle_ms <= 0:
        parser.error("--idle-ms must be positive")
    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    try:
        window = EditorWindow(
            args.width, args.height, CELL_METRICS.line_spacing, file=args.file
        )
    except BufferLoadError as exc:
        print(f"yoers: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    app = YoersApp(window, idle_interval=args.idle_ms / 1000.0)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
