"""Built-in command handlers operating on the active view."""

from __future__ import annotations

from yoers.view import Direction, View


def move_left(view: View) -> None:
    view.move_cursor(Direction.LEFT)


def move_right(view: View) -> None:
    view.move_cursor(Direction.RIGHT)


def move_up(view: View) -> None:
    view.move_cursor(Direction.UP)


def move_down(view: View) -> None:
    view.move_cursor(Direction.DOWN)


def page_up(view: View) -> None:
    view.move_page(Direction.UP)


def page_down(view: View) -> None:
    view.move_page(Direction.DOWN)


def home(view: View) -> None:
    view.home()


def end(view: View) -> None:
    view.end()


def backspace(view: View) -> None:
    view.backspace()


def delete(view: View) -> None:
    view.delete_at_cursor()


def newline(view: View) -> None:
    view.insert_char("\n")


def tab(view: View) -> None:
    view.insert_char("\t")


def undo(view: View) -> None:
    view.undo()


def redo(view: View) -> None:
    view.redo()


def select_all(view: View) -> None:
    view.select_all()


__all__ = [
    "backspace",
    "delete",
    "end",
    "home",
    "move_down",
    "move_left",
    "move_right",
    "move_up",
    "newline",
    "page_down",
    "page_up",
    "redo",
    "select_all",
    "tab",
    "undo",
]
