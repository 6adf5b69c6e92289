# whkd

Tools for a simple hotkey daemon. You describe your hotkeys in a
plain-text `whkdrc` file; this package reads that file into Python
objects, works out which command a hotkey should run, and keeps a
long-running shell session (`cmd`, `powershell` or `pwsh`) that
commands are written to.

## The whkdrc file

```
# the shell is required and must come first (after any comments)
.shell pwsh                       # one of cmd | pwsh | powershell

# optional: a hotkey that pauses and resumes every other hotkey
.pause alt + shift + p

# optional: a command run each time the pause hotkey is pressed
.pause_hook komorebic toggle-pause

# per-application bindings
alt + n [
    Default       : echo "hello world"
    Firefox       : echo "hello firefox"
    Google Chrome : echo "hello chrome"   # spaces are fine, no quotes needed
    Zen Browser   : Ignore
]

# plain bindings: at least one is required
alt + h : komorebic focus left
alt + 1 : komorebic focus-workspace 0
f11     : echo "hello f11"
```

Rules worth knowing:

- Comments start with `#` and run to the end of the line.
- Keys are joined with `+`; the last key is the trigger, the rest are
  modifiers. Key names are identifiers or whole numbers.
- In an application block, `Default` is used when no named application
  matches, and `Ignore` means "do nothing" for that application.
- Application blocks come before plain bindings.
- Reading stops after the last binding that parses; anything after it
  is ignored.

## Parsing

```python
from whkd.parser import parse, load, ParseError

with open("whkdrc", encoding="utf-8") as handle:
    config = parse(handle.read())   # raises ParseError on bad input

config = load("whkdrc")             # OSError if unreadable, ParseError if invalid

print(config.shell)                 # e.g. "pwsh"
for binding in config.bindings:
    print(binding.keys, binding.command)
```

`ParseError` is a subclass of `WhkdError` and carries `line`, `column`
and, when raised by `load`, the `path` of the file.

The result is a `whkd.config.Whkdrc` dataclass with:

- `shell`: a `Shell` member (`Shell.CMD`, `Shell.POWERSHELL`,
  `Shell.PWSH`); `str(shell)` gives the program name and
  `shell.is_powershell` is true for both PowerShell flavours;
- `app_bindings`: a list of `(keys, [HotkeyBinding, ...])` pairs, one per
  application block, each binding carrying its `process_name`;
- `bindings`: the plain `HotkeyBinding` list (`keys`, `command`,
  `process_name` of `None`);
- `pause_binding` and `pause_hook`: the optional pause hotkey keys and
  pause command, or `None`.

## Daemon helpers

`whkd.daemon` provides:

- `default_config_path(environ=None)`: `~/.config/whkdrc`, or
  `whkdrc` inside `$WHKD_CONFIG_HOME` when that variable is set. Raises
  `WhkdError` if the variable names something that is not a directory.
- `split_hotkey(keys)`: returns `(modifiers, trigger)`; raises
  `ValueError` for an empty list.
- `group_app_bindings(whkdrc)`: a dict from keys joined with `+` to all
  the application bindings for that combination.
- `select_app_command(bindings, app_name)`: the command for the named
  application, else the `Default` one; `None` when nothing matches or the
  chosen command is `Ignore`.
- `ShellSession(shell)`: one shell process fed through its standard
  input. `spawn()` starts (or replaces) the process and sends its setup
  line; `run(command)` writes one command line, starting a fresh process
  once if writing fails, and returns whether the command was sent (it
  sends nothing before `spawn()`); with a PowerShell shell each command
  is also printed to standard output. `close()` closes the input and
  waits up to five seconds before killing the process. `running` tells
  whether a process is attached, and the session works as a context
  manager that spawns on entry and closes on exit.

```python
from whkd.daemon import ShellSession

with ShellSession(config.shell) as session:
    session.run("echo hello")
```

## What this package does not do

It does not listen to the keyboard or register system-wide hotkeys,
does not find out which application window is active, and has no
command to start a daemon. A program that wants to act on key presses
must capture them itself and then use `split_hotkey`,
`select_app_command` and `ShellSession.run` to decide on and run the
command.