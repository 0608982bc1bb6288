"""Frame loop: drain input, dispatch it, redraw only when something happened."""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Iterable, Protocol, Sequence

from yoers.commands import Command, CommandRegistry
from yoers.render import DisplayCommand, FontMetrics, RenderStyle
from yoers.runtime import telemetry

from .editor_window import EditorWindow
from .events import Event, KeyDown, KeyUp, Quit, Resize, TextInput

DEFAULT_IDLE_INTERVAL = 0.01


class Backend(Protocol):
    """Event source and drawing surface supplied by the windowing layer."""

    metrics: FontMetrics
    style: RenderStyle

    def poll_events(self) -> Iterable[Event]: ...

    def present(self, display_list: Sequence[DisplayCommand]) -> None:
        """Clear to ``style.background`` and replay ``display_list`` in order."""
        ...


class LoopState(Enum):
    IDLE = "idle"
    REDRAW_PENDING = "redraw_pending"
    QUIT = "quit"


class MainLoop:
    """Owns the dispatch cycle for one :class:`EditorWindow`.

    Events are handled strictly in arrival order; the redraw for a frame runs
    after the whole batch is drained. Exceptions raised by commands are not
    caught here.
    """

    def __init__(
        self,
        window: EditorWindow,
        backend: Backend,
        registry: CommandRegistry,
        *,
        idle_interval: float = DEFAULT_IDLE_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.window = window
        self.backend = backend
        self.registry = registry
        self.idle_interval = idle_interval
        self.state = LoopState.REDRAW_PENDING
        self.frames = 0
        self._sleep = sleep

    @property
    def finished(self) -> bool:
        return self.state is LoopState.QUIT

    def run(self) -> None:
        while not self.finished:
            if not self.run_frame() and not self.finished:
                self._sleep(self.idle_interval)
        telemetry.record_event("loop.quit", data={"frames": self.frames})

    def run_frame(self) -> bool:
        """Process one batch of events; return ``True`` if a frame was drawn."""

        for event in self.backend.poll_events():
            self.state = LoopState.REDRAW_PENDING
            self.handle_event(event)
            if self.finished:
                return False

        if self.state is not LoopState.REDRAW_PENDING:
            return False
        display_list = self.window.draw(self.backend.metrics, self.backend.style)
        self.backend.present(display_list)
        self.frames += 1
        self.state = LoopState.IDLE
        return True

    def handle_event(self, event: Event) -> None:
        window = self.window
        if isinstance(event, KeyDown):
            command = self.registry.lookup(event.binding)
            if command is not None:
                self._run_command(command)
            if event.key == "escape":
                self.state = LoopState.QUIT
            elif event.key == "shift":
                window.start_selection()
        elif isinstance(event, KeyUp):
            if event.key == "shift":
                window.end_selection()
        elif isinstance(event, TextInput):
            for ch in event.text:
                window.insert_char(ch)
        elif isinstance(event, Resize):
            window.resize(event.width, event.height)
        elif isinstance(event, Quit):
            self.state = LoopState.QUIT

    def _run_command(self, command: Command) -> None:
        with telemetry.span(
            "commands::run",
            component="commands",
            metadata={"command_id": command.id},
        ):
            command.run(self.window.active_view)


__all__ = ["Backend", "DEFAULT_IDLE_INTERVAL", "LoopState", "MainLoop"]
