"""Shell session and hotkey dispatch logic for the whkd daemon."""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path

from whkd.config import HotkeyBinding, Shell, Whkdrc
from whkd.parser import WhkdError

CREATE_NO_WINDOW = 0x0800_0000
CONFIG_HOME_VARIABLE = "WHKD_CONFIG_HOME"
CONFIG_FILE_NAME = "whkdrc"
DEFAULT_PROCESS = "Default"
IGNORE_COMMAND = "Ignore"

_POWERSHELL_SETUP = "$wshell = New-Object -ComObject wscript.shell"
_CMD_SETUP = "prompt $S"
_CLOSE_TIMEOUT = 5.0


def _creation_flags() -> int:
    return CREATE_NO_WINDOW if os.name == "nt" else 0


class ShellSession:
    """A long-lived shell process that hotkey commands are written to, line by line."""

    def __init__(self, shell: Shell | str):
        self.shell = shell if isinstance(shell, Shell) else Shell(shell)
        self._process: subprocess.Popen | None = None
        self._lock = threading.RLock()

    def __enter__(self) -> ShellSession:
        if self._process is None:
            self.spawn()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def running(self) -> bool:
        """True while a shell process is attached to this session."""
        return self._process is not None

    def _arguments(self) -> tuple[list[str], str, str]:
        binary = str(self.shell)
        if self.shell.is_powershell:
            return [binary, "-Command", "-"], _POWERSHELL_SETUP, "powershell"
        return [binary, "-"], _CMD_SETUP, "cmd"

    def spawn(self) -> None:
        """Start a fresh shell process, replacing any previous one."""
        args, setup, label = self._arguments()
        process = subprocess.Popen(
            args,
            stdin=subprocess.PIPE,
            text=True,
            creationflags=_creation_flags(),
        )
        if process.stdin is None:
            raise WhkdError(f"could not take stdin from {label} session")
        process.stdin.write(setup + "\n")
        process.stdin.flush()

        with self._lock:
            previous, self._process = self._process, process
        if previous is not None and previous.stdin is not None:
            try:
                previous.stdin.close()
            except (OSError, ValueError):
                pass

    def _write(self, command: str) -> bool:
        if self.shell.is_powershell:
            print(command)
        try:
            self._process.stdin.write(command + "\n")
            self._process.stdin.flush()
        except (OSError, ValueError):
            return False
        return True

    def run(self, command: str) -> bool:
        """Send a command to the shell, respawning it once if writing fails.

        Returns True when the command was written. Nothing is sent when no
        shell has been spawned.
        """
        with self._lock:
            if self._process is None:
                return False
            if self._write(command):
                return True
            try:
                self.spawn()
            except (OSError, WhkdError):
                return False
            if self._write(command):
                return True
            print("Unable to write to stdin session", file=sys.stderr)
            return False

    def close(self) -> None:
        """Close the shell's input and wait for it to exit."""
        with self._lock:
            process, self._process = self._process, None
        if process is None:
            return
        if process.stdin is not None:
            try:
                process.stdin.close()
            except (OSError, ValueError):
                pass
        try:
            process.wait(timeout=_CLOSE_TIMEOUT)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()


def split_hotkey(keys: Iterable[str]) -> tuple[list[str], str]:
    """Split a key combination into its modifier keys and its trigger key."""
    *modifiers, trigger = keys or [None] if not keys else keys
    if trigger is None:
        raise ValueError("a hotkey needs at least one key")
    return list(modifiers), trigger


def group_app_bindings(whkdrc: Whkdrc) -> dict[str, list[HotkeyBinding]]:
    """Group process-scoped bindings by their key combination, joined with '+'."""
    grouped: dict[str, list[HotkeyBinding]] = {}
    for keys, bindings in whkdrc.app_bindings:
        grouped.setdefault("+".join(keys), []).extend(bindings)
    return grouped


def select_app_command(bindings: Iterable[HotkeyBinding], app_name: str) -> str | None:
    """Pick the command for the active application, if any.

    A binding for the named process wins over the Default one; the last
    match of each kind counts. A selected command of Ignore yields None.
    """
    matched = None
    default = None
    for binding in bindings:
        process = binding.process_name
        if process is None:
            continue
        if process == DEFAULT_PROCESS:
            default = binding.command
        if app_name == process:
            matched = binding.command

    command = matched if matched is not None else default
    if command is None or command == IGNORE_COMMAND:
        return None
    return command


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Locate whkdrc: under $WHKD_CONFIG_HOME if set, else ~/.config."""
    environ = os.environ if environ is None else environ
    config_home = environ.get(CONFIG_HOME_VARIABLE)
    if config_home is None:
        return Path.home() / ".config" / CONFIG_FILE_NAME
    home = Path(config_home)
    if not home.is_dir():
        raise WhkdError(
            f"$Env:{CONFIG_HOME_VARIABLE} is set to '{config_home}', "
            "which is not a valid directory"
        )
    return home / CONFIG_FILE_NAME