"""Input events delivered by a backend to the main loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from yoers.commands import KeyBinding, normalize_key, normalize_modifiers


@dataclass(frozen=True, slots=True)
class KeyDown:
    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", normalize_key(self.key))
        object.__setattr__(self, "modifiers", normalize_modifiers(self.modifiers))

    @property
    def binding(self) -> KeyBinding:
        return KeyBinding(self.key, self.modifiers)


@dataclass(frozen=True, slots=True)
class KeyUp:
    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", normalize_key(self.key))
        object.__setattr__(self, "modifiers", normalize_modifiers(self.modifiers))


@dataclass(frozen=True, slots=True)
class TextInput:
    """Composed text, as opposed to the raw key that produced it."""

    text: str


@dataclass(frozen=True, slots=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Quit:
    pass


Event = Union[KeyDown, KeyUp, TextInput, Resize, Quit]

__all__ = ["Event", "KeyDown", "KeyUp", "Quit", "Resize", "TextInput"]
