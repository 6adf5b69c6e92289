"""whkdrc configuration parsing, command selection and shell sessions for a hotkey daemon."""

__version__ = "0.2.9"
__all__ = ["config", "parser", "daemon"]