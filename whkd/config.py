"""Data model for a parsed whkdrc configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Shell(Enum):
    """Shell that runs the commands bound to hotkeys."""

    CMD = "cmd"
    POWERSHELL = "powershell"
    PWSH = "pwsh"

    def __str__(self) -> str:
        return self.value

    @property
    def is_powershell(self) -> bool:
        """True for both PowerShell flavours."""
        return self in (Shell.POWERSHELL, Shell.PWSH)


@dataclass
class HotkeyBinding:
    """A key combination bound to a command, optionally scoped to a process."""

    keys: list[str]
    command: str
    process_name: str | None = None


@dataclass
class Whkdrc:
    """A complete whkdrc configuration."""

    shell: Shell
    app_bindings: list[tuple[list[str], list[HotkeyBinding]]] = field(default_factory=list)
    bindings: list[HotkeyBinding] = field(default_factory=list)
    pause_binding: list[str] | None = None
    pause_hook: str | None = None