"""Widgets for the open-session-files TUI."""

from .edited_files_panel import EditedFilesPanel

__all__ = ["EditedFilesPanel"]
