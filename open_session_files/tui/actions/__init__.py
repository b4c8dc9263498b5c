"""Action mixins for the open-session-files TUI app."""

from .open_file import OpenFileMixin

__all__ = ["OpenFileMixin"]
