"""Parser for the whkdrc configuration format."""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

from whkd.config import HotkeyBinding, Shell, Whkdrc

_WHITESPACE = re.compile(r"\s*")
_NEWLINE = re.compile(r"\r\n|[\n\r\x0b\x0c\x85\u2028\u2029]")
_COMMENT = re.compile(r"#[^\n\r\x0b\x0c\x85\u2028\u2029]*(?:\r\n|[\n\r\x0b\x0c\x85\u2028\u2029])")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_HOTKEY = re.compile(r"[A-Za-z_][A-Za-z0-9_]*|0|[1-9][0-9]*")
_SHELL_NAMES = ("pwsh", "powershell", "cmd")

_MISSING = object()


class WhkdError(Exception):
    """Base class for whkdrc errors."""


class ParseError(WhkdError):
    """Raised when whkdrc text does not follow the expected format."""

    def __init__(self, line: int, column: int, path: os.PathLike | str | None = None):
        self.line = line
        self.column = column
        self.path = path
        where = f"line {line}, column {column}"
        if path is None:
            message = f"could not parse whkdrc at {where}"
        else:
            message = f"could not load whkdrc from {path} ({where})"
        super().__init__(message)


class _NoMatch(Exception):
    pass


class _Parser:
    """Backtracking recursive-descent reader over whkdrc text."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.furthest = 0

    # primitives

    def fail(self) -> None:
        self.furthest = max(self.furthest, self.pos)
        raise _NoMatch

    def attempt(self, rule: Callable[[], Any]) -> Any:
        start = self.pos
        try:
            return rule()
        except _NoMatch:
            self.pos = start
            return _MISSING

    def many(self, rule: Callable[[], Any]) -> list[Any]:
        items = []
        while (item := self.attempt(rule)) is not _MISSING:
            items.append(item)
        return items

    def some(self, rule: Callable[[], Any]) -> list[Any]:
        return [rule(), *self.many(rule)]

    def skip_whitespace(self) -> None:
        self.pos = _WHITESPACE.match(self.text, self.pos).end()

    def match(self, pattern: re.Pattern[str]) -> str:
        found = pattern.match(self.text, self.pos)
        if found is None:
            self.fail()
        self.pos = found.end()
        return found.group()

    def literal(self, word: str) -> str:
        if not self.text.startswith(word, self.pos):
            self.fail()
        self.pos += len(word)
        return word

    def keyword(self, word: str) -> str:
        self.skip_whitespace()
        self.literal(word)
        self.skip_whitespace()
        return word

    # grammar rules

    def comment(self) -> None:
        self.skip_whitespace()
        self.match(_COMMENT)
        self.skip_whitespace()

    def comments(self) -> None:
        self.many(self.comment)

    def hotkey(self) -> str:
        self.skip_whitespace()
        key = self.match(_HOTKEY)
        self.skip_whitespace()
        return key

    def _next_hotkey(self) -> str:
        self.literal("+")
        return self.hotkey()

    def hotkeys(self) -> list[str]:
        return [self.hotkey(), *self.many(self._next_hotkey)]

    def _terminator(self) -> None:
        if self.pos >= len(self.text):
            return
        if self.attempt(self.comment) is _MISSING:
            self.match(_NEWLINE)

    def command(self) -> str:
        self.skip_whitespace()
        start = self.pos
        while True:
            stop = self.pos
            if self.attempt(self._terminator) is not _MISSING:
                break
            self.pos += 1
        self.skip_whitespace()
        return self.text[start:stop]

    def shell(self) -> Shell:
        self.keyword(".shell")
        for name in _SHELL_NAMES:
            if self.text.startswith(name, self.pos):
                self.pos += len(name)
                return Shell(name)
        self.fail()

    def pause(self) -> list[str]:
        self.comments()
        self.keyword(".pause")
        keys = self.hotkeys()
        self.comments()
        return keys

    def pause_hook(self) -> str:
        self.comments()
        self.keyword(".pause_hook")
        hook = self.command()
        self.comments()
        return hook

    def _name_word(self) -> str:
        self.skip_whitespace()
        word = self.match(_IDENT)
        self.skip_whitespace()
        return word

    def process_name(self) -> str:
        if self.attempt(lambda: self.keyword("Default")) is not _MISSING:
            return "Default"
        return " ".join(self.some(self._name_word))

    def process_command(self) -> str:
        if self.attempt(lambda: self.keyword("Ignore")) is not _MISSING:
            return "Ignore"
        return self.command()

    def process_mapping(self) -> tuple[str, str]:
        self.comments()
        self.skip_whitespace()
        name = self.process_name()
        self.keyword(":")
        command = self.process_command()
        self.skip_whitespace()
        self.comments()
        return name, command

    def process_command_map(self) -> list[tuple[str, str]]:
        self.comments()
        self.skip_whitespace()
        self.literal("[")
        mappings = self.some(self.process_mapping)
        self.skip_whitespace()
        self.comments()
        self.literal("]")
        return mappings

    def process_binding(self) -> tuple[list[str], list[HotkeyBinding]]:
        self.comments()
        self.skip_whitespace()
        keys = self.hotkeys()
        mappings = self.process_command_map()
        self.skip_whitespace()
        self.comments()
        return keys, [
            HotkeyBinding(keys=list(keys), command=command, process_name=app)
            for app, command in mappings
        ]

    def binding(self) -> HotkeyBinding:
        self.comments()
        self.skip_whitespace()
        keys = self.hotkeys()
        self.keyword(":")
        command = self.command()
        self.skip_whitespace()
        self.comments()
        return HotkeyBinding(keys=keys, command=command)

    def document(self) -> Whkdrc:
        self.comments()
        shell = self.shell()
        pause_binding = self.attempt(self.pause)
        pause_hook = self.attempt(self.pause_hook)
        app_bindings = self.many(self.process_binding)
        bindings = self.some(self.binding)
        return Whkdrc(
            shell=shell,
            app_bindings=app_bindings,
            bindings=bindings,
            pause_binding=None if pause_binding is _MISSING else pause_binding,
            pause_hook=None if pause_hook is _MISSING else pause_hook,
        )

    def position(self, offset: int) -> tuple[int, int]:
        line = self.text.count("\n", 0, offset) + 1
        column = offset - (self.text.rfind("\n", 0, offset) + 1) + 1
        return line, column


def parse(text: str) -> Whkdrc:
    """Parse whkdrc text into a configuration.

    Reading stops after the last binding that parses; anything after it is ignored.
    """
    reader = _Parser(text)
    try:
        return reader.document()
    except _NoMatch:
        line, column = reader.position(reader.furthest)
        raise ParseError(line, column) from None


def load(path: os.PathLike | str) -> Whkdrc:
    """Read and parse a whkdrc file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        return parse(text)
    except ParseError as error:
        raise ParseError(error.line, error.column, path) from None