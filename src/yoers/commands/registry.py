"""Command registry; its binding index is the editor's keybinding table."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional

from yoers.runtime.telemetry import span

from .models import Command, KeyBinding


@dataclass(slots=True)
class RegistryStats:
    command_count: int
    binding_count: int


class CommandConflictError(RuntimeError):
    """Raised when a command declares a binding that another command owns."""

    def __init__(self, command: Command, conflicts: Iterable[tuple[KeyBinding, str]]):
        conflicts_tuple = tuple(conflicts)
        details = ", ".join(f"{binding} -> {owner}" for binding, owner in conflicts_tuple)
        super().__init__(f"Command '{command.id}' conflicts with [{details}]")
        self.command = command
        self.conflicts = conflicts_tuple


class CommandRegistry:
    """Owns commands and maps each normalized key binding to one command id."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._commands: Dict[str, Command] = {}
        self._bindings: Dict[KeyBinding, str] = {}
        self._logger_name = logger_name

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def get_command(self, command_id: str) -> Command:
        try:
            return self._commands[command_id]
        except KeyError as exc:
            raise KeyError(f"Command '{command_id}' is not registered") from exc

    def register_command(self, command: Command, *, replace: bool = False) -> Command:
        with span(
            "commands::register",
            logger_name=self._logger_name,
            component="commands",
            metadata={"command_id": command.id},
        ) as handle:
            if command.id in self._commands and not replace:
                raise ValueError(f"Command '{command.id}' already registered")

            conflicts = [
                (binding, self._bindings[binding])
                for binding in command.bindings
                if binding in self._bindings and self._bindings[binding] != command.id
            ]
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(str(binding) for binding, _ in conflicts)
                )
                raise CommandConflictError(command, conflicts)

            if command.id in self._commands:
                self._unindex(self._commands[command.id])
            for binding, owner in conflicts:
                self._bindings.pop(binding, None)
                handle.add_metadata(f"displaced:{binding}", owner)

            self._commands[command.id] = command
            for binding in command.bindings:
                self._bindings[binding] = command.id
            return command

    def unregister_command(self, command_id: str) -> Optional[Command]:
        command = self._commands.pop(command_id, None)
        if command is not None:
            self._unindex(command)
        return command

    def lookup(self, binding: KeyBinding) -> Optional[Command]:
        command_id = self._bindings.get(binding)
        if command_id is None:
            return None
        return self._commands[command_id]

    def bindings(self) -> Mapping[KeyBinding, str]:
        return MappingProxyType(self._bindings)

    def iter_commands(self) -> Iterator[Command]:
        yield from self._commands.values()

    def stats(self) -> RegistryStats:
        return RegistryStats(
            command_count=len(self._commands),
            binding_count=len(self._bindings),
        )

    def _unindex(self, command: Command) -> None:
        for binding in command.bindings:
            if self._bindings.get(binding) == command.id:
                del self._bindings[binding]


__all__ = ["CommandConflictError", "CommandRegistry", "RegistryStats"]
