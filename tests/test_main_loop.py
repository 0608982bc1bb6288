from __future__ import annotations

from typing import List, Sequence

import pytest

from yoers.buffer import BufferBorrowError
from yoers.commands import Command, CommandRegistry, load_default_commands
from yoers.render import DEFAULT_STYLE, Char, DisplayCommand, FontMetrics
from yoers.window import (
    EditorWindow,
    Event,
    KeyDown,
    KeyUp,
    LoopState,
    MainLoop,
    Quit,
    Resize,
    TextInput,
)


class FakeBackend:
    metrics = FontMetrics(advance=8, line_spacing=15, height=15)
    style = DEFAULT_STYLE

    def __init__(self, window: EditorWindow, *batches: Sequence[Event]) -> None:
        self.window = window
        self.batches = [list(batch) for batch in batches]
        self.frames: List[List[DisplayCommand]] = []
        self.snapshots: List[str] = []

    def poll_events(self) -> List[Event]:
        if not self.batches:
            return []
        return self.batches.pop(0)

    def present(self, display_list: Sequence[DisplayCommand]) -> None:
        self.frames.append(list(display_list))
        self.snapshots.append(self.window.active_view.buffer.to_string())


def make_registry(*extra: Command) -> CommandRegistry:
    registry = CommandRegistry()
    load_default_commands(registry, extra=extra)
    return registry


def make_loop(
    *batches: Sequence[Event], registry: CommandRegistry | None = None
) -> tuple[MainLoop, FakeBackend, List[float]]:
    window = EditorWindow(640, 480, 15)
    backend = FakeBackend(window, *batches)
    sleeps: List[float] = []
    loop = MainLoop(
        window,
        backend,
        registry or make_registry(),
        idle_interval=0.25,
        sleep=sleeps.append,
    )
    return loop, backend, sleeps


def test_first_frame_is_drawn_without_input() -> None:
    loop, backend, _ = make_loop()

    assert loop.state is LoopState.REDRAW_PENDING
    assert loop.run_frame() is True
    assert loop.state is LoopState.IDLE
    assert len(backend.frames) == 1
    assert loop.run_frame() is False
    assert len(backend.frames) == 1


def test_text_input_then_escape_quits() -> None:
    loop, backend, sleeps = make_loop(
        [TextInput("hi")],
        [KeyDown("Escape")],
    )

    loop.run()

    assert loop.finished
    assert loop.window.active_view.buffer.to_string() == "hi"
    assert backend.snapshots == ["hi"]
    assert sleeps == []


def test_idle_frames_sleep_between_polls() -> None:
    loop, backend, sleeps = make_loop([], [], [Quit()])

    loop.run()

    assert len(backend.frames) == 1
    assert sleeps == [0.25]
    assert loop.frames == 1


def test_whole_batch_is_handled_before_redraw() -> None:
    loop, backend, _ = make_loop(
        [TextInput("abc"), KeyDown("left"), TextInput("X")],
        [Quit()],
    )

    loop.run()

    assert backend.snapshots == ["abXc"]
    glyphs = "".join(
        cmd.glyph for cmd in backend.frames[0] if isinstance(cmd, Char)
    )
    assert glyphs == "abXc"


def test_shift_key_drives_selection() -> None:
    loop, _, _ = make_loop(
        [
            TextInput("abcd"),
            KeyDown("home"),
            KeyDown("lshift"),
            KeyDown("right", ("shift",)),
            KeyDown("right", ("rshift",)),
            KeyUp("lshift"),
        ],
        [Quit()],
    )

    loop.run()

    view = loop.window.active_view
    assert view.selection == range(0, 2)
    assert view.selecting is False


def test_escape_runs_bound_command_before_quitting() -> None:
    calls: List[str] = []
    command = Command(
        id="test.on_escape",
        handler=lambda view: calls.append(view.buffer.name),
        bindings=("escape",),
    )
    loop, _, _ = make_loop([KeyDown("esc")], registry=make_registry(command))

    loop.run()

    assert calls == ["untitled"]
    assert loop.finished


def test_resize_event_updates_page_length() -> None:
    loop, _, _ = make_loop([Resize(800, 600)], [Quit()])

    loop.run()

    assert loop.window.width == 800
    assert loop.window.active_view.page_length == 39


def test_unbound_keys_are_ignored() -> None:
    loop, backend, _ = make_loop([KeyDown("f5", ("ctrl",))], [Quit()])

    loop.run()

    assert len(backend.frames) == 1
    assert loop.window.active_view.buffer.to_string() == ""


def test_command_errors_propagate() -> None:
    def reentrant(view) -> None:
        with view.buffer.transaction("test.reentrant"):
            view.insert_char("x")

    command = Command(id="test.reentrant", handler=reentrant, bindings=("ctrl+r",))
    loop, _, _ = make_loop(
        [KeyDown("r", ("ctrl",))], registry=make_registry(command)
    )

    with pytest.raises(BufferBorrowError):
        loop.run_frame()
    assert loop.window.active_view.buffer.in_transaction is False
