"""Commands bound to keys and the registry that forms the keybinding table."""

from .defaults import DEFAULT_COMMANDS, load_default_commands
from .models import Command, KeyBinding, normalize_key, normalize_modifiers
from .registry import CommandConflictError, CommandRegistry, RegistryStats

__all__ = [
    "Command",
    "CommandConflictError",
    "CommandRegistry",
    "DEFAULT_COMMANDS",
    "KeyBinding",
    "RegistryStats",
    "load_default_commands",
    "normalize_key",
    "normalize_modifiers",
]
