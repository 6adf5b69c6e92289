import pytest

from whkd.config import HotkeyBinding, Shell, Whkdrc
from whkd.parser import ParseError, WhkdError, load, parse


def test_single_line_parse():
    src = '\n.shell pwsh # can be one of cmd | pwsh | powershell\n\nalt + h : echo "Hello"'
    expected = Whkdrc(
        shell=Shell.PWSH,
        app_bindings=[],
        bindings=[HotkeyBinding(["alt", "h"], 'echo "Hello"', None)],
        pause_binding=None,
        pause_hook=None,
    )
    assert parse(src) == expected


def test_starts_with_comment_single_line_parser():
    src = (
        "\n# sample comment\n"
        ".shell pwsh # can be one of cmd | pwsh | powershell\n\n"
        'alt + h : echo "Hello"'
    )
    expected = Whkdrc(
        shell=Shell.PWSH,
        bindings=[HotkeyBinding(["alt", "h"], 'echo "Hello"', None)],
    )
    assert parse(src) == expected


FULL_SOURCE = """
.shell cmd

# Specify different behaviour depending on the app
alt + n [
    # ProcessName as shown by `Get-Process`
    Firefox       : echo "hello firefox"

    # Spaces are fine, no quotes required
    Google Chrome : echo "hello chrome"
]

# leading newlines are fine
# line comments should parse and be ignored
alt + h     : komorebic focus left # so should comments at the end of a line
alt + j     : komorebic focus down
alt + k     : komorebic focus up
alt + l     : komorebic focus right

# so should empty lines
alt + 1 : komorebic focus-workspace 0 # digits are fine in the hotkeys section

# trailing newlines are fine


"""


def test_parse():
    expected = Whkdrc(
        shell=Shell.CMD,
        app_bindings=[
            (
                ["alt", "n"],
                [
                    HotkeyBinding(["alt", "n"], 'echo "hello firefox"', "Firefox"),
                    HotkeyBinding(["alt", "n"], 'echo "hello chrome"', "Google Chrome"),
                ],
            )
        ],
        bindings=[
            HotkeyBinding(["alt", "h"], "komorebic focus left", None),
            HotkeyBinding(["alt", "j"], "komorebic focus down", None),
            HotkeyBinding(["alt", "k"], "komorebic focus up", None),
            HotkeyBinding(["alt", "l"], "komorebic focus right", None),
            HotkeyBinding(["alt", "1"], "komorebic focus-workspace 0", None),
        ],
        pause_binding=None,
        pause_hook=None,
    )
    assert parse(FULL_SOURCE) == expected


def test_binding_without_modkeys():
    src = (
        "\n# sample comment\n"
        ".shell pwsh # can be one of cmd | pwsh | powershell\n\n"
        'f11 : echo "hello f11"'
    )
    expected = Whkdrc(
        shell=Shell.PWSH,
        bindings=[HotkeyBinding(["f11"], 'echo "hello f11"', None)],
    )
    assert parse(src) == expected


def test_default_and_scoped_ignores():
    src = """
.shell pwsh

alt + n [
    Default       : echo "hello world"
    Firefox       : echo "hello firefox"
    Google Chrome : echo "hello chrome"
    Zen Browser   : Ignore
]

alt + h : echo "Hello\""""
    expected = Whkdrc(
        shell=Shell.PWSH,
        app_bindings=[
            (
                ["alt", "n"],
                [
                    HotkeyBinding(["alt", "n"], 'echo "hello world"', "Default"),
                    HotkeyBinding(["alt", "n"], 'echo "hello firefox"', "Firefox"),
                    HotkeyBinding(["alt", "n"], 'echo "hello chrome"', "Google Chrome"),
                    HotkeyBinding(["alt", "n"], "Ignore", "Zen Browser"),
                ],
            )
        ],
        bindings=[HotkeyBinding(["alt", "h"], 'echo "Hello"', None)],
    )
    assert parse(src) == expected


def test_pause_hotkey():
    src = '\n.shell pwsh\n.pause ctrl + shift + esc\n\nalt + h : echo "Hello"'
    expected = Whkdrc(
        shell=Shell.PWSH,
        bindings=[HotkeyBinding(["alt", "h"], 'echo "Hello"', None)],
        pause_binding=["ctrl", "shift", "esc"],
        pause_hook=None,
    )
    assert parse(src) == expected


def test_pause_hook():
    src = (
        "\n.shell pwsh\n.pause ctrl + shift + esc\n"
        ".pause_hook komorebic toggle-pause\n\n"
        'alt + h : echo "Hello"'
    )
    expected = Whkdrc(
        shell=Shell.PWSH,
        bindings=[HotkeyBinding(["alt", "h"], 'echo "Hello"', None)],
        pause_binding=["ctrl", "shift", "esc"],
        pause_hook="komorebic toggle-pause",
    )
    assert parse(src) == expected


def test_pause_hook_with_comments():
    src = (
        "\n.shell pwsh                            # can be one of cmd | pwsh | powershell\n"
        ".pause alt + shift + p                 # can be any hotkey combo to toggle all other hotkeys on and off\n"
        ".pause_hook komorebic toggle-pause     # another comment\n\n"
        'alt + h : echo "Hello"'
    )
    expected = Whkdrc(
        shell=Shell.PWSH,
        bindings=[HotkeyBinding(["alt", "h"], 'echo "Hello"', None)],
        pause_binding=["alt", "shift", "p"],
        pause_hook="komorebic toggle-pause",
    )
    assert parse(src) == expected


@pytest.mark.parametrize("name, shell", [("cmd", Shell.CMD), ("powershell", Shell.POWERSHELL), ("pwsh", Shell.PWSH)])
def test_every_shell_is_accepted(name, shell):
    assert parse(f".shell {name}\nalt + h : echo hi\n").shell is shell


def test_crlf_line_endings():
    config = parse(".shell cmd\r\nalt + h : echo hi\r\nalt + j : echo there\r\n")
    assert [binding.command for binding in config.bindings] == ["echo hi", "echo there"]
    assert [binding.keys for binding in config.bindings] == [["alt", "h"], ["alt", "j"]]


def test_app_binding_keys_are_shared_by_every_entry():
    config = parse(".shell pwsh\nalt + n [\n  Firefox : echo a\n  Default : echo b\n]\nalt + h : echo c")
    keys, entries = config.app_bindings[0]
    assert keys == ["alt", "n"]
    assert all(entry.keys == keys for entry in entries)
    assert [entry.process_name for entry in entries] == ["Firefox", "Default"]


def test_missing_shell_is_an_error():
    with pytest.raises(ParseError):
        parse('alt + h : echo "Hello"')


def test_unsupported_shell_is_an_error():
    with pytest.raises(ParseError) as info:
        parse(".shell zsh\nalt + h : echo hi")
    assert (info.value.line, info.value.column) == (1, 8)
    assert info.value.path is None


def test_at_least_one_binding_is_required():
    with pytest.raises(ParseError):
        parse(".shell pwsh\n.pause ctrl + shift + esc\n")


def test_app_bindings_alone_are_not_enough():
    with pytest.raises(ParseError):
        parse(".shell pwsh\nalt + n [\n  Firefox : echo a\n]\n")


def test_parse_error_is_a_whkd_error():
    with pytest.raises(WhkdError):
        parse("")


def test_load_reads_file(tmp_path):
    path = tmp_path / "whkdrc"
    path.write_text(FULL_SOURCE, encoding="utf-8")
    assert load(path) == parse(FULL_SOURCE)
    assert load(str(path)).shell is Shell.CMD


def test_load_reports_path_on_parse_failure(tmp_path):
    path = tmp_path / "whkdrc"
    path.write_text("not a config", encoding="utf-8")
    with pytest.raises(ParseError) as info:
        load(path)
    assert info.value.path == path
    assert str(path) in str(info.value)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load(tmp_path / "absent")