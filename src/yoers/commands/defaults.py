"""Built-in view commands and the bindings they declare."""

from __future__ import annotations

from typing import Iterable, Sequence

from . import view as view_commands
from .models import Command, KeyBinding
from .registry import CommandRegistry


def _keys(*specs: str) -> tuple[KeyBinding, ...]:
    return tuple(KeyBinding.parse(spec) for spec in specs)


def _with_shift(*keys: str) -> tuple[KeyBinding, ...]:
    # Shift only toggles the selection anchor; the motion itself is the same.
    return _keys(*keys) + _keys(*(f"shift+{key}" for key in keys))


DEFAULT_COMMANDS: tuple[Command, ...] = (
    Command(
        id="view.move_left",
        handler=view_commands.move_left,
        bindings=_with_shift("left"),
        description="Move the caret one character left",
    ),
    Command(
        id="view.move_right",
        handler=view_commands.move_right,
        bindings=_with_shift("right"),
        description="Move the caret one character right",
    ),
    Command(
        id="view.move_up",
        handler=view_commands.move_up,
        bindings=_with_shift("up"),
        description="Move the caret one line up",
    ),
    Command(
        id="view.move_down",
        handler=view_commands.move_down,
        bindings=_with_shift("down"),
        description="Move the caret one line down",
    ),
    Command(
        id="view.page_up",
        handler=view_commands.page_up,
        bindings=_with_shift("pageup"),
        description="Scroll one page up",
    ),
    Command(
        id="view.page_down",
        handler=view_commands.page_down,
        bindings=_with_shift("pagedown"),
        description="Scroll one page down",
    ),
    Command(
        id="view.home",
        handler=view_commands.home,
        bindings=_with_shift("home"),
        description="Move to the start of the line",
    ),
    Command(
        id="view.end",
        handler=view_commands.end,
        bindings=_with_shift("end"),
        description="Move past the last character of the line",
    ),
    Command(
        id="view.backspace",
        handler=view_commands.backspace,
        bindings=_keys("backspace"),
        description="Delete the selection or the character before the caret",
    ),
    Command(
        id="view.delete",
        handler=view_commands.delete,
        bindings=_keys("delete"),
        description="Delete the selection or the character at the caret",
    ),
    Command(
        id="view.newline",
        handler=view_commands.newline,
        bindings=_keys("enter"),
        description="Insert a line break",
    ),
    Command(
        id="view.tab",
        handler=view_commands.tab,
        bindings=_keys("tab"),
        description="Insert a tab character",
    ),
    Command(
        id="view.undo",
        handler=view_commands.undo,
        bindings=_keys("ctrl+z"),
        description="Undo the last edit",
    ),
    Command(
        id="view.redo",
        handler=view_commands.redo,
        bindings=_keys("ctrl+y", "ctrl+shift+z"),
        description="Redo the last undone edit",
    ),
    Command(
        id="view.select_all",
        handler=view_commands.select_all,
        bindings=_keys("ctrl+a"),
        description="Select the whole buffer",
    ),
)


def load_default_commands(
    registry: CommandRegistry,
    *,
    replace: bool = False,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
    extra: Iterable[Command] | None = None,
) -> None:
    """Register the built-in commands (optionally filtered) plus ``extra``."""

    include_set = set(include) if include else None
    exclude_set = set(exclude or ())

    for command in DEFAULT_COMMANDS:
        if include_set is not None and command.id not in include_set:
            continue
        if command.id in exclude_set:
            continue
        registry.register_command(command, replace=replace)

    for command in extra or ():
        registry.register_command(command, replace=replace)


__all__ = ["DEFAULT_COMMANDS", "load_default_commands"]
