"""Editor window state, input events and the frame loop."""

from .editor_window import EditorWindow
from .events import Event, KeyDown, KeyUp, Quit, Resize, TextInput
from .loop import DEFAULT_IDLE_INTERVAL, Backend, LoopState, MainLoop

__all__ = [
    "Backend",
    "DEFAULT_IDLE_INTERVAL",
    "EditorWindow",
    "Event",
    "KeyDown",
    "KeyUp",
    "LoopState",
    "MainLoop",
    "Quit",
    "Resize",
    "TextInput",
]
