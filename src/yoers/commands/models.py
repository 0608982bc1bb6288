"""Key-binding descriptors and command metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterable, Mapping

if TYPE_CHECKING:
    from yoers.view import View

MODIFIERS = ("alt", "ctrl", "shift")

_MODIFIER_ALIASES = {
    "control": "ctrl",
    "ctl": "ctrl",
    "lctrl": "ctrl",
    "rctrl": "ctrl",
    "meta": "alt",
    "option": "alt",
    "lalt": "alt",
    "ralt": "alt",
    "lshift": "shift",
    "rshift": "shift",
}

_KEY_ALIASES = {
    "return": "enter",
    "esc": "escape",
    "lshift": "shift",
    "rshift": "shift",
    "left_shift": "shift",
    "right_shift": "shift",
    "lctrl": "ctrl",
    "rctrl": "ctrl",
    "lalt": "alt",
    "ralt": "alt",
    "pgup": "pageup",
    "page_up": "pageup",
    "pgdn": "pagedown",
    "page_down": "pagedown",
    "del": "delete",
    "bs": "backspace",
}


def normalize_key(key: str) -> str:
    """Fold a backend key name into the editor's canonical lowercase name."""

    if len(key) == 1:
        return key.lower()
    cleaned = key.strip()
    if len(cleaned) == 1:
        return cleaned.lower()
    lowered = cleaned.lower()
    return _KEY_ALIASES.get(lowered, lowered)


def normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    """Reduce modifier names to a sorted subset of ``MODIFIERS``.

    Left/right physical variants collapse into one flag; names outside the
    editor's modifier set (num lock, caps lock, ...) are dropped.
    """

    values = set()
    for modifier in modifiers:
        name = modifier.strip().lower()
        name = _MODIFIER_ALIASES.get(name, name)
        if name in MODIFIERS:
            values.add(name)
    return tuple(sorted(values))


@dataclass(frozen=True, slots=True)
class KeyBinding:
    """Normalized ``(key, modifiers)`` pair used to look up a command."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", normalize_key(self.key))
        object.__setattr__(self, "modifiers", normalize_modifiers(self.modifiers))

    @classmethod
    def parse(cls, spec: str) -> "KeyBinding":
        """Build a binding from ``"ctrl+shift+z"`` style text."""

        parts = [part for part in spec.split("+") if part]
        if not parts:
            raise ValueError(f"invalid key binding '{spec}'")
        return cls(parts[-1], tuple(parts[:-1]))

    @property
    def token(self) -> str:
        return "+".join(self.modifiers + (self.key,))

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True, slots=True)
class Command:
    """An operation on the active view, declaring the keys that trigger it."""

    id: str
    handler: Callable[["View"], object]
    bindings: tuple[KeyBinding, ...] = ()
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Command id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(
            self,
            "bindings",
            tuple(
                b if isinstance(b, KeyBinding) else KeyBinding.parse(str(b))
                for b in self.bindings
            ),
        )
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def run(self, view: "View") -> object:
        return self.handler(view)


__all__ = [
    "Command",
    "KeyBinding",
    "MODIFIERS",
    "normalize_key",
    "normalize_modifiers",
]
